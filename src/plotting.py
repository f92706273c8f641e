"""Visualization functions for laid-out family trees."""

from pathlib import Path

import pydot

from layout import LayoutConfig, positioned_tree
from models import FamilyTree, Member, Point
from routing import EdgeStyle, drawable_edges

POINTS_PER_INCH = 72.0

# SVG dash arrays mapped onto the closest Graphviz edge style
DOT_DASH_STYLES = {"2 4": "dotted"}


def member_label(member: Member) -> str:
    """Card text: given name, surname and life years."""
    birth_year = member.birth_date[:4] if member.birth_date else ""
    death_year = member.death_date[:4] if member.death_date else ""
    return f"{member.first_name}\n{member.last_name or ''}\n{birth_year}-{death_year}"


def member_fillcolor(member: Member) -> str:
    if member.gender == "male":
        return "lightblue"
    if member.gender == "female":
        return "lightpink"
    return "lightgray"


def _with_positions(tree: FamilyTree, positions: dict[int, Point] | None) -> FamilyTree:
    return positioned_tree(tree, positions) if positions else tree


def build_dot(
    tree: FamilyTree,
    positions: dict[int, Point] | None = None,
    config: LayoutConfig | None = None,
) -> pydot.Dot:
    """
    Build a Graphviz graph with every card pinned at its canvas position.

    Render it with `neato -n2` so Graphviz keeps the positions. Canvas y grows
    downward while Graphviz y grows upward, so y is negated.
    """
    config = config or LayoutConfig()
    tree = _with_positions(tree, positions)

    P = pydot.Dot(graph_type="digraph")
    P.set("splines", "line")
    P.set("outputorder", "edgesfirst")

    for m in tree.members:
        cx = m.x + config.card_width / 2
        cy = -(m.y + config.card_height / 2)
        P.add_node(
            pydot.Node(
                str(m.id),
                label=member_label(m),
                shape="box",
                style="rounded,filled",
                fillcolor=member_fillcolor(m),
                fontsize="10",
                pos=f"{cx:.1f},{cy:.1f}!",
                width=f"{config.card_width / POINTS_PER_INCH:.2f}",
                height=f"{config.card_height / POINTS_PER_INCH:.2f}",
                fixedsize="true",
            )
        )

    relationships = {r.id: r for r in tree.relationships}
    for geometry in drawable_edges(tree, config):
        rel = relationships[geometry.relationship_id]
        attrs = {
            "color": geometry.style.color,
            "penwidth": str(geometry.style.width),
        }
        if geometry.style.dash:
            attrs["style"] = DOT_DASH_STYLES.get(geometry.style.dash, "dashed")
        if geometry.arrowhead is None:
            attrs["dir"] = "none"
        if geometry.label:
            attrs["label"] = geometry.label
        P.add_edge(pydot.Edge(str(rel.from_member_id), str(rel.to_member_id), **attrs))

    return P


def write_dot(P: pydot.Dot, output_path: Path):
    """Write DOT source (.dot/.gv) or render it with neato (png/svg/pdf)."""
    ext = output_path.suffix.lower().lstrip(".")
    if ext in ("dot", "gv"):
        P.write(str(output_path), format="raw")
    else:
        if ext not in ("png", "svg", "pdf"):
            ext = "png"
        P.write(str(output_path), prog=["neato", "-n2"], format=ext)
    print(f"Graph saved to {output_path}")


def _linestyle(style: EdgeStyle):
    if not style.dash:
        return "solid"
    return (0, tuple(float(v) for v in style.dash.split()))


def plot_tree(
    tree: FamilyTree,
    positions: dict[int, Point] | None = None,
    output_path: Path | None = None,
    config: LayoutConfig | None = None,
):
    """
    Draw the member cards and routed relationship lines with matplotlib.

    Args:
        tree: Snapshot of members and relationships
        positions: Computed positions to draw instead of the stored ones
        output_path: Path to save the output image (PNG, SVG or PDF). If None, displays interactively.
        config: Card dimensions, must match the ones used for layout
    """
    import matplotlib.pyplot as plt
    from matplotlib.patches import FancyBboxPatch, Polygon

    config = config or LayoutConfig()
    tree = _with_positions(tree, positions)

    fig, ax = plt.subplots(figsize=(20, 16))

    for geometry in drawable_edges(tree, config):
        style = geometry.style
        ax.plot(
            [geometry.start.x, geometry.end.x],
            [geometry.start.y, geometry.end.y],
            color=style.color,
            linewidth=style.width,
            linestyle=_linestyle(style),
            zorder=1,
        )
        if geometry.arrowhead is not None:
            head = geometry.arrowhead
            ax.add_patch(
                Polygon(
                    [(head.tip.x, head.tip.y), (head.left.x, head.left.y), (head.right.x, head.right.y)],
                    closed=True,
                    color=style.color,
                    zorder=2,
                )
            )
        if geometry.label:
            mid = geometry.midpoint
            ax.text(
                mid.x,
                mid.y,
                geometry.label,
                ha="center",
                va="center",
                fontsize=8,
                bbox={"boxstyle": "round", "facecolor": "white", "edgecolor": style.color},
                zorder=4,
            )

    for m in tree.members:
        ax.add_patch(
            FancyBboxPatch(
                (m.x, m.y),
                config.card_width,
                config.card_height,
                boxstyle="round,pad=0,rounding_size=8",
                facecolor=member_fillcolor(m),
                edgecolor="darkgray",
                zorder=3,
            )
        )
        ax.text(
            m.x + config.card_width / 2,
            m.y + config.card_height / 2,
            member_label(m),
            ha="center",
            va="center",
            fontsize=9,
            zorder=4,
        )

    margin = config.horizontal_gap
    if tree.members:
        ax.set_xlim(min(m.x for m in tree.members) - margin, max(m.x for m in tree.members) + config.card_width + margin)
        # Canvas y grows downward
        ax.set_ylim(max(m.y for m in tree.members) + config.card_height + margin, min(m.y for m in tree.members) - margin)
    ax.set_aspect("equal")
    ax.axis("off")
    fig.tight_layout()

    if output_path:
        ext = output_path.suffix.lower().lstrip(".")
        if ext not in ("png", "svg", "pdf"):
            ext = "png"
        fig.savefig(str(output_path), format=ext)
        plt.close(fig)
        print(f"Graph saved to {output_path}")
    else:
        plt.show()

"""Render pedigree trees as markdown."""

import io

from kennel_pedigree.core.tree.positions import iter_preorder, node_at, path_label
from kennel_pedigree.models.pedigree import AncestorNode, PedigreeTree


def _describe(node: AncestorNode, *, include_details: bool) -> str:
    dog = node.dog
    text = f"**{dog.display_name}** {dog.gender.symbol}"
    if not include_details:
        return text
    details = [
        value
        for value in (
            dog.registration_number,
            dog.breed,
            dog.color,
            dog.date_of_birth.isoformat() if dog.date_of_birth else None,
        )
        if value
    ]
    if details:
        text += f" ({', '.join(details)})"
    return text


def render_pedigree_as_markdown(
    tree: PedigreeTree,
    *,
    max_depth: int | None = None,
    include_details: bool = True,
) -> str:
    """Render a pedigree as an indented markdown list, sire line first.

    Args:
        tree: The pedigree to render.
        max_depth: Generations to render (None = everything the tree holds).
        include_details: Whether to include registration, breed, color and birth date.

    Returns:
        Markdown string with one bullet per slot. Unknown slots are listed too,
        so the layout of every generation is complete.
    """
    depth = tree.max_generations if max_depth is None else min(max_depth, tree.max_generations)

    out = io.StringIO()
    for path in iter_preorder(depth):
        indent = "    " * len(path)
        label = path_label(path).capitalize()
        node = node_at(tree, path)

        if node is None:
            # Parents of an unknown dog are unknown too; only list the first gap.
            if path and node_at(tree, path[:-1]) is None:
                continue
            out.write(f"{indent}- {label}: unknown\n")
            continue

        out.write(f"{indent}- {label}: {_describe(node, include_details=include_details)}\n")

        # Truncation indicator when recorded parents are cut off by the depth
        if len(path) == depth and (node.dog.sire_id or node.dog.dam_id):
            out.write(f"{indent}    - ... (ancestry continues, id={node.id})\n")

    return out.getvalue()

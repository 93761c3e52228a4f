"""
Read-only Tree Visitor.

`CueVisitor.walk` performs a pre-order traversal of a syntax tree. Subclasses
hook node types by defining `visit_<ClassName>` (called before the children;
returning `False` prunes the subtree) and `leave_<ClassName>` (called after the
children).
"""

from cue_imports.core.cue.nodes import Node, iter_children


class CueVisitor:
  """Base class for passes that inspect, but never modify, a CUE tree."""

  def walk(self, node: Node) -> None:
    """
    Visits `node` and, unless pruned, all of its descendants.

    Args:
        node: Root of the subtree to traverse.
    """
    name = type(node).__name__
    visit = getattr(self, f"visit_{name}", None)
    if visit is None or visit(node) is not False:
      for child in iter_children(node):
        self.walk(child)
    leave = getattr(self, f"leave_{name}", None)
    if leave is not None:
      leave(node)

from typing import Any, Callable, List, Optional, Tuple

# ## Constants

# Return this from a node visit function to abort a tree visit.
STOP = "stop"
# The constant representing the left child side of a node.
LEFT = "left"
# The constant representing the right child side of a node.
RIGHT = "right"

VisitFn = Callable[["BinaryTreeNode", int, Any], Optional[str]]


class BinaryTreeNode:
    """
    The binary tree node is the base node for expression trees. A node owns
    its left and right children and keeps a back reference to its parent so
    that serialization can ask which side of the parent a node is on.
    """

    _idCounter = 0

    left: Optional["BinaryTreeNode"]
    right: Optional["BinaryTreeNode"]
    parent: Optional["BinaryTreeNode"]

    #  Allow specifying children in the constructor
    def __init__(
        self,
        left: "BinaryTreeNode" = None,
        right: "BinaryTreeNode" = None,
        parent: "BinaryTreeNode" = None,
        id: Optional[str] = None,
    ):
        if id is None:
            BinaryTreeNode._idCounter = BinaryTreeNode._idCounter + 1
            id = f"tn-{BinaryTreeNode._idCounter}"
        self.id = id
        self.left = None
        self.right = None
        self.set_left(left)
        self.set_right(right)
        self.parent = parent

    def is_leaf(self) -> bool:
        """Is this node a leaf?  A node is a leaf if it has no children."""
        return not self.left and not self.right

    def __str__(self):
        """Serialize the node as a str"""
        return "{} {}".format(self.left, self.right)

    @property
    def name(self) -> str:
        """Human readable name for this node."""
        return "BinaryTreeNode"

    # Visits use an explicit stack and never recurse, whatever the tree depth.

    def visit_preorder(self, visit_fn: VisitFn, depth=0, data=None):
        """Visit the tree preorder, which visits the current node, then its left
        child, and then its right child.

        *Visit -> Left -> Right*

        The callback function is passed three arguments: the node being
        visited, the current depth in the tree, and a user specified data
        parameter. Traversals may be canceled by returning `STOP` from any
        visit function.
        """
        stack: List[Tuple["BinaryTreeNode", int]] = [(self, depth)]
        while stack:
            node, node_depth = stack.pop()
            if visit_fn and visit_fn(node, node_depth, data) == STOP:
                return STOP
            if node.right:
                stack.append((node.right, node_depth + 1))
            if node.left:
                stack.append((node.left, node_depth + 1))
        return None

    def visit_inorder(self, visit_fn: VisitFn, depth=0, data=None):
        """Visit the tree inorder, which visits the left child, then the current node,
        and then its right child.

        *Left -> Visit -> Right*
        """
        stack: List[Tuple["BinaryTreeNode", int]] = []
        node: Optional["BinaryTreeNode"] = self
        node_depth = depth
        while stack or node:
            while node:
                stack.append((node, node_depth))
                node = node.left
                node_depth += 1
            current, current_depth = stack.pop()
            if visit_fn and visit_fn(current, current_depth, data) == STOP:
                return STOP
            node = current.right
            node_depth = current_depth + 1
        return None

    def visit_postorder(self, visit_fn: VisitFn, depth=0, data=None):
        """Visit the tree postorder, which visits its left child, then its right child,
        and finally the current node.

        *Left -> Right -> Visit*
        """
        # The flag marks nodes whose children are already on the stack
        stack: List[Tuple["BinaryTreeNode", int, bool]] = [(self, depth, False)]
        while stack:
            node, node_depth, expanded = stack.pop()
            if expanded:
                if visit_fn and visit_fn(node, node_depth, data) == STOP:
                    return STOP
                continue
            stack.append((node, node_depth, True))
            if node.right:
                stack.append((node.right, node_depth + 1, False))
            if node.left:
                stack.append((node.left, node_depth + 1, False))
        return None

    def get_root(self) -> "BinaryTreeNode":
        """Return the root element of this tree"""
        result = self
        while result.parent:
            result = result.parent

        return result

    # **Child Management**
    #
    # Methods for setting the children on this node.  These take care of
    # making sure that the proper parent assignments also take place.

    def set_left(self, child: "BinaryTreeNode" = None) -> "BinaryTreeNode":
        """Set the left node to the passed `child`"""
        if child is self:
            raise ValueError("nodes cannot be their own children")
        self.left = child
        if self.left:
            self.left.parent = self

        return self

    def set_right(self, child: "BinaryTreeNode" = None) -> "BinaryTreeNode":
        """Set the right node to the passed `child`"""
        if child is self:
            raise ValueError("nodes cannot be their own children")
        self.right = child
        if self.right:
            self.right.parent = self

        return self

    def get_side(self, child: "BinaryTreeNode") -> str:
        """Determine whether the given `child` is the left or right child of this
        node"""
        if child is self.left:
            return LEFT

        if child is self.right:
            return RIGHT

        raise ValueError("BinaryTreeNode.get_side: not a child of this node")

    def get_children(self) -> List["BinaryTreeNode"]:
        """Get children as an array.  If there are two children, the first object will
        always represent the left child, and the second will represent the right."""
        result = []
        if self.left:
            result.append(self.left)

        if self.right:
            result.append(self.right)

        return result

from typing import Dict, Any, List, Callable, TypeVar, Optional, Type, Generic
from functools import wraps
from dataclasses import dataclass, field

T = TypeVar('T')

@dataclass
class WalkContext:
    """Context information for node traversal"""
    parent: Optional[Dict[str, Any]] = None
    level: int = 0
    path: List[str] = field(default_factory=list)

NodeHandler = Callable[['ASTWalker', Dict[str, Any], WalkContext], Any]

class ASTWalker:
    """
    A generic AST walker that applies handlers to nodes in an abstract syntax tree.

    Handlers are looked up by the node's name first (the rule identity, such
    as `Header` or `Float`), then by its type (the combinator kind, such as
    `Tag` or `Minmax`).
    """
    def __init__(self):
        self.handlers: Dict[str, NodeHandler] = {}
        self.default_handler: Optional[NodeHandler] = None
        self.context: Dict[str, Any] = {}

    def _wrap(self, handler: NodeHandler, auto_traverse: bool) -> Callable[[Dict[str, Any], WalkContext], Any]:
        @wraps(handler)
        def wrapper(node: Dict[str, Any], walk_context: WalkContext = None) -> Any:
            if walk_context is None:
                walk_context = WalkContext()

            if auto_traverse and isinstance(node.get("value"), list):
                node["processed_value"] = [self.walk(item,
                                                     parent=node,
                                                     level=walk_context.level + 1,
                                                     path=walk_context.path)
                                           for item in node["value"]]

            return handler(self, node, walk_context)
        return wrapper

    def for_node(self, node_type: str, auto_traverse: bool = True) -> Callable[[NodeHandler], NodeHandler]:
        """
        Register a handler for a specific node name or type.

        Args:
            node_type: The name or type of the node to handle
            auto_traverse: If True, the walker will automatically traverse child nodes
                           before calling the handler
        """
        def decorator(handler: NodeHandler) -> NodeHandler:
            self.handlers[node_type] = self._wrap(handler, auto_traverse)
            return handler
        return decorator

    def default(self, auto_traverse: bool = True) -> Callable[[NodeHandler], NodeHandler]:
        """Register a default handler for unrecognized node types."""
        def decorator(handler: NodeHandler) -> NodeHandler:
            self.default_handler = self._wrap(handler, auto_traverse)
            return handler
        return decorator

    def with_context(self, **kwargs) -> 'ASTWalker':
        """Add context data for handler use."""
        self.context.update(kwargs)
        return self

    def clear_context(self) -> None:
        """Clear the context data."""
        self.context.clear()

    def walk(self, ast_node: Any, parent: Dict[str, Any] = None, level: int = 0, path: List[str] = None) -> Any:
        """
        Walk the AST and apply registered handlers.

        Args:
            ast_node: The current node being processed
            parent: The parent node of the current node
            level: The recursion depth/level of the current node
            path: The path of node names traversed to reach this node
        """
        if path is None:
            path = []

        if hasattr(ast_node, 'ast'):
            return self.walk(ast_node.ast(), parent, level, path)

        if not isinstance(ast_node, (dict, list)):
            return ast_node

        if isinstance(ast_node, list):
            return [self.walk(item, parent, level + 1, path) for item in ast_node]

        node_type = ast_node.get("type", ast_node.get("name"))
        node_name = ast_node.get("name", node_type)
        current_path = path + ([node_name] if node_name else [])

        walk_context = WalkContext(parent=parent, level=level, path=current_path)

        if node_name in self.handlers:
            return self.handlers[node_name](ast_node, walk_context)
        if node_type in self.handlers:
            return self.handlers[node_type](ast_node, walk_context)
        if self.default_handler:
            return self.default_handler(ast_node, walk_context)
        return self._default_process(ast_node, walk_context)

    def _default_process(self, node: Dict[str, Any], walk_context: WalkContext) -> Dict[str, Any]:
        """Default processing for nodes without registered handlers"""
        node_type = node.get("name")
        value = node.get("value")

        if isinstance(value, list):
            processed_values = [self.walk(item,
                                         parent=node,
                                         level=walk_context.level + 1,
                                         path=walk_context.path)
                               for item in value]
            return {"type": node_type, "children": processed_values}
        return {"type": node_type, "value": value}

class TypedASTWalker(Generic[T]):
    """
    A strongly-typed AST walker that transforms parse trees into specific types.
    """
    def __init__(self, output_type: Type[T], root_name: str):
        self.walker = ASTWalker()
        self.output_type = output_type
        self.root_name = root_name

    def for_node(self, node_type: str, auto_traverse: bool = True) -> Callable:
        """
        Register a handler for a specific node name or type.

        Args:
            node_type: The name or type of the node to handle
            auto_traverse: If True, the walker will automatically traverse child nodes
                           before calling the handler
        """
        return self.walker.for_node(node_type, auto_traverse)

    def default(self, auto_traverse: bool = True) -> Callable:
        return self.walker.default(auto_traverse)

    def with_context(self, **kwargs) -> 'TypedASTWalker[T]':
        self.walker.with_context(**kwargs)
        return self

    def clear_context(self) -> None:
        self.walker.clear_context()

    def walk(self, ast_node: Any) -> T:
        """Walk the AST and return a result (only enforce type at root level)"""
        if hasattr(ast_node, 'ast'):
            actual_ast = ast_node.ast()
        else:
            actual_ast = ast_node

        result = self.walker.walk(actual_ast)

        if isinstance(actual_ast, dict) and actual_ast.get("name") == self.root_name:
            if not isinstance(result, self.output_type):
                raise TypeError(f"Expected {self.output_type.__name__}, got {type(result).__name__}")

        return result

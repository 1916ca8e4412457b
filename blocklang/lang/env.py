"""Chained scope frames. Each Environment owns its own bindings and functions and holds a plain reference to its parent;
lookups walk from the innermost frame outwards, while stores only ever touch the frame they are called on.

Children are created by the block or function call that needs them and dropped when that call returns, so a parent
always outlives its children.
"""

from blocklang.lang.error import RecursionDepthExceeded, UndefinedBinding, UndefinedFunction


class Environment:
    """One scope frame. The root frame (no parent) decides the maximum depth of the whole chain."""
    MAX_DEPTH = 100  # nested blocks + function calls

    def __init__(self, parent=None, max_depth=None):
        self.parent = parent
        self.bindings = {}  # dict of name: Value
        self.funcs = {}     # dict of name: (list of param names, body Stmt)

        if parent is None:
            self.depth = 0
            self.max_depth = Environment.MAX_DEPTH if max_depth is None else max_depth
        else:
            self.depth = parent.depth + 1
            self.max_depth = parent.max_depth

    def store_binding(self, name, value):
        """Inserts or overwrites name in this frame only."""
        self.bindings[name] = value

    def get_binding(self, name):
        env = self
        while env is not None:
            if name in env.bindings:
                return env.bindings[name]
            env = env.parent
        raise UndefinedBinding(name)

    def has_binding(self, name):
        try:
            self.get_binding(name)
        except UndefinedBinding:
            return False
        return True

    def store_func(self, name, params, body):
        """Inserts or overwrites function name in this frame only."""
        self.funcs[name] = (list(params), body)

    def get_func(self, name):
        """Returns (params, body) of the innermost function called name."""
        env = self
        while env is not None:
            if name in env.funcs:
                params, body = env.funcs[name]
                return list(params), body
            env = env.parent
        raise UndefinedFunction(name)

    def has_func(self, name):
        try:
            self.get_func(name)
        except UndefinedFunction:
            return False
        return True

    def create_child(self):
        """Returns a new, empty frame whose parent is self."""
        if self.depth + 1 > self.max_depth:
            raise RecursionDepthExceeded(self.max_depth)
        return Environment(self)

    def __repr__(self):
        return f"Environment(depth={self.depth}, bindings={self.bindings}, funcs={list(self.funcs)})"

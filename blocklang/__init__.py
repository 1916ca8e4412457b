"""blocklang: an interpreter for a small expression language with integer arithmetic, let bindings, lexically nested
blocks and functions with positional parameters.

Basic program flow:
    1. Parser: parser combinators (blocklang/lang/combinators.py) compose into the statement and expression grammar of
       blocklang/lang/lexical.py, turning source text into a tree of grammar objects
    2. Evaluation: the tree is walked recursively, threading a chain of scope frames (blocklang/lang/env.py)
    3. blocklang/syntax holds a separate precedence-climbing front end that only builds concrete syntax trees
"""

from blocklang.lang.env import Environment
from blocklang.lang.lexical import Parse, parse
from blocklang.lang.value import UNIT, Number, Unit, Value

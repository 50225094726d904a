from typing import List

from .utils import *

import queue

def _hashable(value):
  if isinstance(value, list):
    return tuple(map(_hashable, value))
  if isinstance(value, dict):
    return tuple(sorted((key, _hashable(item)) for key, item in value.items()))
  return value

class Expr(object):
  """
  The base class of the expression and relational plan nodes produced by the base grammar.
  Nodes are compared and hashed by the values of their attributes, so two parses of the same text are equal.
  """
  __slots__ = ()

  def __eq__(self, other):
    """Compare two Exprs by values of attributes, instead of by reference"""
    return (
      getClass(other) == getClass(self)
      and all(
        getattr(self, attr) == getattr(other, attr)
        for attr in self.__slots__
      )
    )

  def __ne__(self, other):
    return not self == other

  def __hash__(self):
    return hash((getClass(self),) + tuple(_hashable(getattr(self, attr)) for attr in self.__slots__))

  def __repr__(self):
    return "<{}: {}>".format(getClassNameOfInstance(self), str(self))

  def __str__(self):
    raise NotImplementedError

class SimpleOp(Expr):
  """
  The non-relational operators that work on simple calculation or logical expressions,
  like '<', 'AND', '+', etc.
  """
  __slots__ = ()

  def __str__(self):
    return self.render(str)

  def render(self, show) -> str:
    """
    Renders the expression as text, where 'show' renders each of its operands.
    Parentheses are added wherever an operand binds looser than its operator.
    """
    raise NotImplementedError

def _operand(show, expr: Expr, *looser_ops) -> str:
  if isinstance(expr, looser_ops):
    return "({})".format(show(expr))
  return show(expr)

class UnaryOp(SimpleOp):
  __slots__ = ('expr',)
  def __init__(self, expr):
    self.expr = expr

class NegOp(UnaryOp):
  """ - (expr)"""
  __slots__ = ('expr',)
  def render(self, show):
    return "-{}".format(_operand(show, self.expr, BinaryOp))

class NotOp(UnaryOp):
  """ not (expr)"""
  __slots__ = ('expr',)
  def render(self, show):
    return "NOT {}".format(_operand(show, self.expr, BinaryOp, NotOp))

class BinaryOp(SimpleOp):
  __slots__ = ('lhs', 'rhs')

  def __init__(self, lhs, rhs):
    self.lhs = lhs
    self.rhs = rhs

class And(BinaryOp):
  """lhs and rhs"""
  __slots__ = ('lhs', 'rhs')
  def render(self, show):
    return "{} AND {}".format(_operand(show, self.lhs, Or), _operand(show, self.rhs, Or, And))

class Or(BinaryOp):
  """lhs or rhs"""
  __slots__ = ('lhs', 'rhs')
  def render(self, show):
    return "{} OR {}".format(show(self.lhs), _operand(show, self.rhs, Or))

class ComparisonOp(BinaryOp):
  __slots__ = ('lhs', 'rhs')
  symbol = None
  def render(self, show):
    return "{} {} {}".format(
      _operand(show, self.lhs, And, Or, ComparisonOp),
      self.symbol,
      _operand(show, self.rhs, And, Or, ComparisonOp)
    )

class LtOp(ComparisonOp):
  """Less than"""
  __slots__ = ('lhs', 'rhs')
  symbol = '<'

class LeOp(ComparisonOp):
  """Less than or equal to"""
  __slots__ = ('lhs', 'rhs')
  symbol = '<='

class EqOp(ComparisonOp):
  """Equal to"""
  __slots__ = ('lhs', 'rhs')
  symbol = '='

class NeOp(ComparisonOp):
  """Not equal to"""
  __slots__ = ('lhs', 'rhs')
  symbol = '!='

class GeOp(ComparisonOp):
  """Greater than or equal to"""
  __slots__ = ('lhs', 'rhs')
  symbol = '>='

class GtOp(ComparisonOp):
  """Greater than"""
  __slots__ = ('lhs', 'rhs')
  symbol = '>'

class IsOp(ComparisonOp):
  """x is y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'IS'

class IsNotOp(ComparisonOp):
  """x is not y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'IS NOT'

class LikeOp(ComparisonOp):
  """x LIKE y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'LIKE'

class NotLikeOp(ComparisonOp):
  """x NOT LIKE y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'NOT LIKE'

class RLikeOp(ComparisonOp):
  """x RLIKE y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'RLIKE'

class NotRLikeOp(ComparisonOp):
  """x NOT RLIKE y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'NOT RLIKE'

class RegExpOp(ComparisonOp):
  """x REGEXP y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'REGEXP'

class InOp(ComparisonOp):
  """x in y"""
  __slots__ = ('lhs', 'rhs')
  symbol = 'IN'

class ArithmeticOp(BinaryOp):
  __slots__ = ('lhs', 'rhs')
  symbol = None
  precedence = 0
  def render(self, show):
    lhs, rhs = show(self.lhs), show(self.rhs)
    if isinstance(self.lhs, (And, Or, ComparisonOp)) or (
      isinstance(self.lhs, ArithmeticOp) and self.lhs.precedence < self.precedence
    ):
      lhs = "({})".format(lhs)
    # operators of the same precedence are left-associative
    if isinstance(self.rhs, (And, Or, ComparisonOp)) or (
      isinstance(self.rhs, ArithmeticOp) and self.rhs.precedence <= self.precedence
    ):
      rhs = "({})".format(rhs)
    return "{} {} {}".format(lhs, self.symbol, rhs)

class AddOp(ArithmeticOp):
  """lhs + rhs"""
  __slots__ = ('lhs', 'rhs')
  symbol = '+'
  precedence = 1

class SubOp(ArithmeticOp):
  """lhs - rhs"""
  __slots__ = ('lhs', 'rhs')
  symbol = '-'
  precedence = 1

class MulOp(ArithmeticOp):
  """lhs * rhs"""
  __slots__ = ('lhs', 'rhs')
  symbol = '*'
  precedence = 2

class DivOp(ArithmeticOp):
  """lhs / rhs"""
  __slots__ = ('lhs', 'rhs')
  symbol = '/'
  precedence = 2

class BetweenOp(BinaryOp):
  """ x between lhs and rhs"""
  __slots__ = ('expr', 'lhs', 'rhs')
  def __init__(self, expr, lhs, rhs):
    self.expr = expr
    self.lhs  = lhs
    self.rhs  = rhs
  def render(self, show):
    return "{} BETWEEN {} AND {}".format(show(self.expr), show(self.lhs), show(self.rhs))

class Value(SimpleOp):
  """
  The expressions that can act as the values of SimpleOps,
  like constants, variables, functions, etc.
  """
  __slots__ = ()

class Const(Value):
  __slots__ = ('const',)

  def __init__(self, const):
    self.const = const
  def render(self, show):
    return str(self.const)

  def toText(self) -> str:
    """The textual representation of the constant, None for the SQL null"""
    return str(self.const)

class NullConst(Const):
  """Null or None"""
  __slots__ = ()
  const = None
  def __init__(self):
    pass
  def render(self, show):
    return "null"
  def toText(self) -> str:
    return None

class NumberConst(Const):
  """Integer or Float"""
  __slots__ = ('const',)

class StringConst(Const):
  """A string"""
  __slots__ = ('const',)
  def render(self, show):
    return "'{}'".format(str(self.const))

class BoolConst(Const):
  """A boolean const"""
  __slots__ = ()
  def __init__(self):
    pass
  def render(self, show):
    return "true" if self.const else "false"
  def toText(self) -> str:
    return str(self)

class TrueConst(BoolConst):
  """The constant True """
  __slots__ = ()
  const = True

class FalseConst(BoolConst):
  """The constant False """
  __slots__ = ()
  const = False

class Var(Value):
  __slots__ = ('path',)
  def __init__(self, path):
    self.path = path
  def render(self, show):
    return str(self.path)

class Tuple(Value):
  __slots__ = ('exprs',)
  def __init__(self, *exprs):
    self.exprs = exprs
  def render(self, show):
    return "({})".format(', '.join(map(show, self.exprs)))

class Function(Value):
  __slots__ = ('name', 'args')
  def __init__(self, name, *args):
    self.name = name
    self.args = args

  def render(self, show):
    return self.name + "(" + ', '.join(map(show, self.args)) + ")"

class CaseWhenOp(Value):
  __slots__ = ('conditions', 'default_value')
  def __init__(self, conditions, default_value):
    self.conditions = conditions
    self.default_value = default_value
  def render(self, show):
    branches = ' '.join(
      "WHEN {} THEN {}".format(show(c['condition']), show(c['expr'])) for c in self.conditions
    )
    if self.default_value is not None:
      branches += " ELSE {}".format(show(self.default_value))
    return "CASE {} END".format(branches)

class CastOp(Value):
  __slots__ = ('expr', 'type')
  def __init__(self, expr, type):
    self.expr = expr
    self.type = type
  def render(self, show):
    return "CAST({} AS {})".format(show(self.expr), str(self.type))

COMPARISON_OPS = {
  '<'  : LtOp,
  '<=' : LeOp,
  '='  : EqOp,
  '!=' : NeOp,
  '>=' : GeOp,
  '>'  : GtOp,
  'is' : IsOp,
  'is not' : IsNotOp,
  'like' : LikeOp,
  'rlike': RLikeOp,
  'not like' : NotLikeOp,
  'not rlike' : NotRLikeOp,
  'regexp': RegExpOp
}

MULTIPLICATIVE_OPS ={
  '*'  : MulOp,
  '/'  : DivOp
}

ADDITIVE_OPS = {
  '+'  : AddOp,
  '-'  : SubOp
}

# sql specific expresions

class Desc(UnaryOp):
  """Sort from highest to lowest """
  __slots__ = ('expr',)
  def render(self, show):
    return "{} DESC".format(show(self.expr))

class SelectAllExpr(Expr):
  __slots__ = ('table',)

  def __init__(self, table=None):
    self.table = table
  def __str__(self):
    return "*" if self.table is None else "{}.*".format(self.table)

class RenameOp(Expr):
  __slots__ = ('name', 'expr')

  def __init__(self, name, expr):
    self.name = name
    self.expr  = expr
  def __str__(self):
    return "{} AS {}".format(str(self.expr), self.name)


"""
  'RelationalOp' is the base class for operators with only one input relation/child,
  of which the child is stored by 'relation' attr, except LoadOp.

  'BinRelationalOp' is the base class for operators with two input relations/children,
  of which the children are stored by 'left' and 'right' attrs.

  'SuperRelationalOp' is the super class for both of RelationalOp and BinRelationalOp.
  We use it only to ease the type-checking of AST nodes.
"""

class SuperRelationalOp(Expr):
  __slots__ = ()
  def getStrFormat(self) -> str:
    return "{} : {}"
  def getOpName(self) -> str:
    return getClassNameOfInstance(self).replace('Op', '')

class RelationalOp(SuperRelationalOp):
  __slots__ = ()
  def __str__(self):
    raise NotImplementedError

class LoadOp(RelationalOp):
  """Load a relation with the given name"""
  __slots__ = ('name',)
  def __init__(self, name):
    self.name = name
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), self.name)

class AliasOp(RelationalOp):
  """Rename the relation to the given name"""
  __slots__ = ('relation', 'name')
  def __init__(self, name, relation):
    self.name = name
    self.relation = relation
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), self.name)

class ProjectionOp(RelationalOp):
  __slots__ = ('relation', 'exprs')
  def __init__(self, relation, *exprs):
    self.relation = relation
    # 'exprs' is the returning list of 'select_core_exp' method in query_parser_toolbox.py
    self.exprs = exprs
  def __str__(self):
    operand = ', '.join(map(str, self.exprs))
    return self.getStrFormat().format(self.getOpName(), operand)

class SelectionOp(RelationalOp):
  __slots__ = ('relation', 'bool_op')
  def __init__(self, relation, bool_op):
    self.relation = relation
    self.bool_op = bool_op
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), str(self.bool_op))

class OrderByOp(RelationalOp):
  __slots__ = ('relation', 'exprs')
  def __init__(self, relation, first, *exprs):
    self.relation = relation
    self.exprs = (first,) + exprs
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), ', '.join(map(str, self.exprs)))

class GroupByOp(RelationalOp):
  __slots__ = ('relation', 'exprs')
  def __init__(self, relation, *exprs):
    self.relation = relation
    self.exprs = exprs
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), ', '.join(map(str, self.exprs)))

class SliceOp(RelationalOp):
  __slots__ = ('relation', 'start', 'stop')
  def __init__(self, relation, *args):
    self.relation = relation
    if len(args) == 1:
      self.start = 0
      self.stop = args[0]
    else:
      self.start, self.stop = args
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), "{}:{}".format(self.start, self.stop))

class InsertIntoOp(RelationalOp):
  """INSERT INTO|OVERWRITE TABLE name <query>"""
  __slots__ = ('relation', 'table_name', 'overwrite')
  def __init__(self, table_name, relation, overwrite=False):
    self.table_name = table_name
    self.relation = relation
    self.overwrite = overwrite
  def __str__(self):
    return self.getStrFormat().format(
      "InsertOverwrite" if self.overwrite else "InsertInto", self.table_name
    )

class WithOp(RelationalOp):
  """WITH name AS (<query>) [, ...] <query>, where 'ctes' keeps (name, query) pairs in order"""
  __slots__ = ('relation', 'ctes')
  def __init__(self, relation, *ctes):
    self.relation = relation
    self.ctes = ctes
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), ', '.join(name for name, _ in self.ctes))

class BinRelationalOp(SuperRelationalOp):
  """
  RelationalOp that operates on two relations
  """
  __slots__ = ()

class UnionAllOp(BinRelationalOp):
  """Combine the results of multiple operations with identical schemas
  into one.
  """
  __slots__ = ('left', 'right')
  def __init__(self, left, right):
    self.left = left
    self.right = right
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), 'all')

class JoinOp(BinRelationalOp):
  __slots__ = ('left', 'right', 'bool_op')
  def __init__(self, left, right, bool_op = None):
    self.left = left
    self.right = right
    self.bool_op = TrueConst() if bool_op is None else bool_op
  def __str__(self):
    return self.getStrFormat().format(self.getOpName(), str(self.bool_op))

class LeftJoinOp(JoinOp):
  __slots__ = ('left', 'right', 'bool_op')


def getChildren(node: Expr) -> List[Expr]:
  ERROR_IF_NONE(node, "getChildren(node) received NoneType")
  ERROR_IF_NOT_INSTANCE_OF(node, Expr,
    "getChildren(node) only accepts an Expr as input ({} received)".format(type(node))
  )
  if isinstance(node, (LoadOp, Value)):
    # LoadOp and Value nodes have no children
    return []
  if isinstance(node, UnaryOp):
    return [node.expr]
  if isinstance(node, BetweenOp):
    return [node.expr, node.lhs, node.rhs]
  if isinstance(node, BinaryOp):
    return [node.lhs, node.rhs]
  if isinstance(node, RelationalOp):
    return [node.relation]
  if isinstance(node, BinRelationalOp):
    return [node.left, node.right]
  if isinstance(node, (SelectAllExpr,)):
    return []
  if isinstance(node, RenameOp):
    return [node.expr]
  raise NotImplementedError("has not yet supported this type of AST node")

def traverse(ast: Expr, order: str = 'dfs'):
  """
  Traverses the ast by BFS or DFS
  Note that each yielded node is a reference to the original node in the ast, instead of a copy of the node by value.
  """
  ERROR_IF_NONE(ast, "cannot traverse NoneType")
  ERROR_IF_NOT_INSTANCE_OF(ast, Expr,
    "method 'traverse' only accepts an Expr as the first argument ({} received)".format(type(ast))
  )
  if order == 'dfs':
    yield ast
    for child in getChildren(ast):
      for node in traverse(child, order):
        yield node
  elif order == 'bfs':
    q = queue.Queue()
    q.put(ast)
    while not q.empty():
      node = q.get()
      yield node
      for child in getChildren(node):
        q.put(child)
  else:
    raise ValueError("Unsupported traversal order: {}".format(order))

from ..query_parser import parse, parse_statement
from ..ast import *
from ..utils.exceptions import SQLSyntaxError

def test_expression_precedence():
  assert parse('a + b * 2') == AddOp(Var('a'), MulOp(Var('b'), NumberConst(2)))
  assert parse('(a + b) * 2') == MulOp(AddOp(Var('a'), Var('b')), NumberConst(2))
  assert parse('a = 1 or b = 2 and c = 3') == Or(
    EqOp(Var('a'), NumberConst(1)),
    And(EqOp(Var('b'), NumberConst(2)), EqOp(Var('c'), NumberConst(3)))
  )
  assert parse('x between 1 and 3') == BetweenOp(Var('x'), NumberConst(1), NumberConst(3))
  assert parse('a is not null') == IsNotOp(Var('a'), NullConst())
  assert parse('a not like "b%"') == NotLikeOp(Var('a'), StringConst('b%'))
  assert parse('a in (1, 2)') == InOp(Var('a'), Tuple(NumberConst(1), NumberConst(2)))
  assert parse('a not in (1)') == NotOp(InOp(Var('a'), Tuple(NumberConst(1))))
  assert parse('-a <= 1.5') == LeOp(NegOp(Var('a')), NumberConst(1.5))

def test_expression_to_str():
  for text in (
    'a + b * 2',
    '(a + b) * 2',
    'a = 1 OR b = 2 AND c = 3',
    '(a = 1 OR b = 2) AND c = 3',
    "name LIKE 'a%'",
    'a IS NOT null',
    'f(a, 1) != true',
    'CASE WHEN a > 1 THEN 1 ELSE 0 END',
    'CAST(a AS int)',
  ):
    assert str(parse(text)) == text
    assert parse(str(parse(text))) == parse(text)

def test_identifiers():
  assert parse('t.`select`') == Var('t.select')
  assert parse('`key` = 1') == EqOp(Var('key'), NumberConst(1))
  try:
    parse('key = 1')
    assert False
  except Exception as e:
    assert isinstance(e, SQLSyntaxError)

def test_select_statement():
  ast = parse_statement('select * from t where a = 1 order by a desc limit 10')
  assert ast == SliceOp(
    OrderByOp(SelectionOp(LoadOp('t'), EqOp(Var('a'), NumberConst(1))), Desc(Var('a'))),
    0, 10
  )
  ast = parse_statement('select a, count(b) as n from t group by a')
  assert ast == GroupByOp(
    ProjectionOp(LoadOp('t'), Var('a'), RenameOp('n', Function('count', Var('b')))),
    Var('a')
  )
  ast = parse_statement('select a from t union all select a from s')
  assert isinstance(ast, UnionAllOp)
  assert ast.right == ProjectionOp(LoadOp('s'), Var('a'))

def test_joins():
  ast = parse_statement('select * from t1 as x left join t2 y on x.id = y.id')
  assert ast == LeftJoinOp(
    AliasOp('x', LoadOp('t1')), AliasOp('y', LoadOp('t2')),
    EqOp(Var('x.id'), Var('y.id'))
  )
  ast = parse_statement('select * from t1, t2')
  assert ast == JoinOp(LoadOp('t1'), LoadOp('t2'))
  assert ast.bool_op == TrueConst()

def test_getChildren_and_traverse():
  ast = parse_statement('select a from t where a > 1 and b < 2')
  selection = getChildren(ast)[0]
  assert isinstance(selection, SelectionOp)
  assert getChildren(selection) == [LoadOp('t')]
  assert getChildren(LoadOp('t')) == []
  nodes = list(traverse(ast))
  assert [type(node) for node in nodes] == [ProjectionOp, SelectionOp, LoadOp]

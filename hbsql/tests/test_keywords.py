from ..keywords import Keyword, KeywordTable
from ..query_parser import getKeywords, parse_statement, HBaseSQLParser
from ..query_parser_toolbox import tokenize, isReserved, BASE_KEYWORDS
from ..extensions.extended_syntax.hbase_syntax import HBaseSyntax
from ..commands import DropTableCommand
from ..utils.exceptions import SQLSyntaxError, ExtensionInternalError

def test_Keyword():
  assert Keyword.of('drop') == Keyword('drop', 'DROP')
  assert Keyword.of('=', 'EQ').tag == 'EQ'

def test_KeywordTable():
  table = KeywordTable([Keyword.of('load'), Keyword.of('LOAD'), Keyword.of('data')])
  # duplicated texts are dropped case-insensitively, the first one is kept
  assert table.texts() == ['load', 'data']
  assert table.tags() == ['LOAD', 'DATA']
  assert table.isKeyword('LoAd') and 'DATA' in table
  assert not table.isKeyword('loader')
  assert table.get('Data') == Keyword('data', 'DATA')
  assert table.get('nothing') is None

  merged = table.merge(KeywordTable([Keyword.of('inpath'), Keyword.of('load', 'OTHER')]))
  assert merged.texts() == ['load', 'data', 'inpath']
  assert merged.get('load').tag == 'LOAD'
  # merging builds a new table
  assert table.texts() == ['load', 'data']

  try:
    table._keywords = ()
    assert False
  except Exception as e:
    assert isinstance(e, AttributeError)

  try:
    KeywordTable(['load'])
    assert False
  except Exception as e:
    assert isinstance(e, ExtensionInternalError)

def test_getKeywords():
  keywords = getKeywords()
  # the keywords of the dialect come first, followed by the base ones
  assert keywords[:3] == ['add', 'alter', 'cols']
  assert keywords.index('=') < keywords.index('select')
  for word in ('drop', 'parall', 'terminated', 'set', 'select', 'where', 'insert', 'table', 'by'):
    assert word in keywords
  assert len(set(word.lower() for word in keywords)) == len(keywords)
  assert HBaseSQLParser().getKeywords() == keywords
  assert HBaseSyntax.getExtendedKeywords().get('=').tag == 'EQ'

def test_reserved_tokens():
  keywords = HBaseSQLParser().keywords
  tokens = tokenize('Drop TABLE `key` Key', keywords)
  assert tokens == ['drop', 'table', '`key`', 'key']
  assert isReserved(tokens[0]) and isReserved(tokens[1]) and isReserved(tokens[3])
  assert not isReserved(tokens[2])
  # the base keywords alone do not reserve the words of the dialect
  assert not isReserved(tokenize('drop', BASE_KEYWORDS)[0])

def test_reserved_word_as_identifier():
  for sql in ('DROP TABLE key', 'DROP TABLE Values', 'drop table SELECT'):
    try:
      parse_statement(sql)
      assert False
    except Exception as e:
      assert isinstance(e, SQLSyntaxError)
  assert parse_statement('DROP TABLE `key`') == DropTableCommand('key')
  assert parse_statement('DROP TABLE keys') == DropTableCommand('keys')

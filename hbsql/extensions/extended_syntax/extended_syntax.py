from ...keywords import KeywordTable
from ...utils import *
from ... import query_parser_toolbox as toolbox

class ExtendedSyntax(object):
  """The abstract class for extended syntax"""
  __slots__ = {
    # plugin syntax symbols, each character of the string is a symbol for the tokenizer
    '_extended_symbols_': '-> str',
    # plugin reserved words, merged with the reserved words of the base grammar
    '_extended_keywords_': '-> KeywordTable',
  }

  @classmethod
  def declares(cls, attr: str) -> bool:
    """Whether the extended syntax subclass gives a value to the attribute, which the slots above only document"""
    return any(attr in klass.__dict__ for klass in cls.__mro__ if klass is not ExtendedSyntax)

  @classmethod
  def addExtendedSymbols(cls) -> None:
    """
    Adds extended syntax symbols for the tokenizer to recognize.
    The symbols are defined by the attribute '_extended_symbols_' of the extended syntax subclass,
      where each character of the attribute value represents a symbol.
    """
    if cls.declares("_extended_symbols_"):
      toolbox.addSyntaxSymbol(cls._extended_symbols_)

  @classmethod
  def removeExtendedSymbols(cls) -> None:
    if cls.declares("_extended_symbols_"):
      toolbox.removeSyntaxSymbol(cls._extended_symbols_)

  @classmethod
  def getExtendedKeywords(cls) -> KeywordTable:
    """
    Returns the reserved words declared by the attribute '_extended_keywords_',
      or an empty table if the syntax reserves no word.
    """
    if cls.declares("_extended_keywords_"):
      ERROR_IF_NOT_INSTANCE_OF(cls._extended_keywords_, KeywordTable,
        "'_extended_keywords_' of {} must be a KeywordTable ({} received)".format(
          getClassNameOfClass(cls), type(cls._extended_keywords_)
        ),
        ExtensionInternalError
      )
      return cls._extended_keywords_
    return KeywordTable(())

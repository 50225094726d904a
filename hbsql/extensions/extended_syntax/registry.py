from collections import OrderedDict
from .extended_syntax import ExtendedSyntax
from .registry_utils import *
from .hbase_syntax import HBaseSyntax
from ...utils.logger import Logger

logger = Logger.general_logger

"""
The registry is a dict(name -> RegEntry)
  where the name is the string to identify the following entry which should be unique.

The statement parsers of the registered syntax are tried after the base statements,
  in the order of the registry and then in the order of each entry.
Note that when there are multiple entries in the registry,
  several trigger functions may be True for the same statement.
  Only the parser function corresponding to the first True trigger function will be called to parse the statement,
  while others will be ignored.
"""
registry: Registry = OrderedDict({
  "hbase": RegEntry(
              syntax=HBaseSyntax,
              statement_parsers=OrderedDict([
                ("drop", ("trigger_drop", "parse_drop")),
                ("alter_drop", ("trigger_alter_drop", "parse_alter_drop")),
                ("alter_add", ("trigger_alter_add", "parse_alter_add")),
                ("insert_values", ("trigger_insert_values", "parse_insert_values")),
                ("update", ("trigger_update", "parse_update")),
                ("delete", ("trigger_delete", "parse_delete")),
                ("load", ("trigger_load", "parse_load")),
              ]),
              entry_points=[
                HBaseSyntax.addExtendedSymbols,
              ]
            ),
})


isRegInitilized = False

def getRegistry() -> Registry:
  return registry

def validateRegistry():
  ERROR_IF_NOT_INSTANCE_OF(
    registry, OrderedDict,
    "The registry must be an OrderedDict(should not be {}).".format(type(registry)),
    RegistryError
  )
  for syntax_name, reg_entry in registry.items():
    ERROR_IF_NOT_INSTANCE_OF(
      reg_entry, RegEntry,
      "registry['{}'] must be a RegEntry(should not be {}).".format(syntax_name, type(reg_entry)),
      RegistryError
    )
    ERROR_IF_FALSE(
      issubclass(reg_entry.syntax, ExtendedSyntax),
      "registry['{}'].syntax must be a subclass of ExtendedSyntax.".format(syntax_name),
      RegistryError
    )
    ERROR_IF_NOT_INSTANCE_OF(
      reg_entry.statement_parsers, OrderedDict,
      "RegEntry.statement_parsers must be an OrderedDict(should not be {}).".format(type(reg_entry.statement_parsers)),
      RegistryError
    )
    for statement, (trigger_func, parser_func) in reg_entry.statement_parsers.items():
      for func_name in (trigger_func, parser_func):
        ERROR_IF_FALSE(
          hasattr(reg_entry.syntax, func_name),
          "'{}' of statement '{}.{}' is not defined by {}.".format(
            func_name, syntax_name, statement, getClassNameOfClass(reg_entry.syntax)
          ),
          RegistryError
        )

def initRegistry():
  global isRegInitilized
  if isRegInitilized:
    return
  validateRegistry()
  for syntax in registry:
    # calls the functions mounted at entry points
    #   to inject extended symbols
    reg_entry = registry[syntax]
    for func in reg_entry.entry_points:
      func()
    logger.debug("extended syntax '{}' initialized".format(syntax))
  isRegInitilized = True

initRegistry()

from enum import Enum
from collections import namedtuple

from .utils import *

class FieldType(Enum):
  STRING = 'STRING'
  FLOAT = 'FLOAT'
  INT = 'INT'
  TINYINT = 'TINYINT'
  SMALLINT = 'SMALLINT'
  DOUBLE = 'DOUBLE'
  BIGINT = 'BIGINT'
  BINARY = 'BINARY'
  BOOLEAN = 'BOOLEAN'
  DECIMAL = 'DECIMAL'
  DATE = 'DATE'
  TIMESTAMP = 'TIMESTAMP'
  VARCHAR = 'VARCHAR'
  BYTE = 'BYTE'

class DataType(namedtuple('DataType', 'type, precision, scale, length')):
  """
  A scalar type tag.
  Only DECIMAL uses 'precision' and 'scale', and only VARCHAR uses 'length';
    they are None for every other type.
  """
  __slots__ = ()

  def __new__(cls, type: FieldType, precision: int = None, scale: int = None, length: int = None):
    ERROR_IF_NOT_INSTANCE_OF(type, FieldType,
      "DataType requires a FieldType ({} received)".format(getClassNameOfInstance(type))
    )
    if type == FieldType.DECIMAL:
      ERROR_IF_FALSE(precision is not None and scale is not None,
        "DECIMAL requires both precision and scale"
      )
      ERROR_IF_FALSE(0 <= scale <= precision,
        "invalid DECIMAL({},{}): scale must be between 0 and precision".format(precision, scale)
      )
    elif type == FieldType.VARCHAR:
      ERROR_IF_FALSE(length is not None and length > 0, "VARCHAR requires a positive length")
    return super().__new__(cls, type, precision, scale, length)

  @classmethod
  def decimal(cls, precision: int, scale: int) -> 'DataType':
    return cls(FieldType.DECIMAL, precision=precision, scale=scale)

  @classmethod
  def varchar(cls, length: int) -> 'DataType':
    return cls(FieldType.VARCHAR, length=length)

  @property
  def name(self) -> str:
    return self.type.value

  def __str__(self):
    if self.type == FieldType.DECIMAL:
      return "{}({},{})".format(self.name, self.precision, self.scale)
    if self.type == FieldType.VARCHAR:
      return "{}({})".format(self.name, self.length)
    return self.name

class Field(object):
  """A column definition, i.e., a column name with its data type"""
  __slots__ = {
    'name': "-> string [REQUIRED]",
    'type': "-> DataType [REQUIRED]",
  }

  def __init__(self, name: str, type: DataType):
    ERROR_IF_NOT_INSTANCE_OF(type, DataType,
      "the type of column '{}' must be a DataType ({} received)".format(name, getClassNameOfInstance(type))
    )
    self.name = name
    self.type = type

  def __repr__(self):
    return "<Field(name={name}, type={type}) at {id}>".format(
      id=id(self),
      name=self.name,
      type=self.type
    )

  def __eq__(self, other):
    return (
      isinstance(other, Field)
      and self.name == other.name
      and self.type == other.type
    )

  def __ne__(self, other):
    return not self == other

  def __hash__(self):
    return hash((self.name, self.type))

  def new(self, **parts):
    attrs = {attr: getattr(self, attr) for attr in self.__slots__}
    attrs.update(parts)
    return self.__class__(**attrs)

  def to_dict(self):
    return dict(
      name = self.name,
      type = str(self.type)
    )

class MappingEntry(namedtuple('MappingEntry', 'column, family, qualifier')):
  """Locates the values of a logical column under a column family and qualifier"""
  __slots__ = ()

  def __str__(self):
    return '{} = "{}.{}"'.format(self.column, self.family, self.qualifier)

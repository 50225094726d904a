from typing import Callable, Union, Type

from .exceptions import *

def getClassNameOfInstance(obj):
    return type(obj).__name__

def getClassNameOfClass(cls):
    return cls.__name__

def getClass(obj):
    return obj.__class__

def getFuncByName(instance_or_class: Union[object, Type], func_name: str) -> Callable:
    return getattr(instance_or_class, func_name)

def ERROR_IF_NOT_EQ(arg1, arg2, msg = None, exception_type = ValueError):
    # tokens are str subclasses, so only the values are compared
    if arg1 != arg2:
        if msg is None:
            msg = "arg1 and arg2 are not equal."
        raise exception_type(msg)

def ERROR_IF_EXISTS_IN(arg1, arg2, msg = None, exception_type = RuntimeError):
    if arg1 in arg2:
        if msg is None:
            msg = "arg1 exists in arg2."
        raise exception_type(msg)

def ERROR_IF_NOT_INSTANCE_OF(obj, typename, msg = None, exception_type = TypeError):
    if not isinstance(obj, typename):
        if msg is None:
            msg = "obj is not an instance of the given type."
        raise exception_type(msg)

def ERROR_IF_NONE(arg, msg = None, exception_type = ValueError):
    if arg is None:
        if msg is None:
            msg = "arg is None."
        raise exception_type(msg)

def ERROR_IF_FALSE(statement, msg = None, exception_type = ValueError):
    if statement == False:
        if msg is None:
            msg = "statement is False."
        raise exception_type(msg)

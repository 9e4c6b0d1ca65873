"""Testing utilities for DazzleBind consumers."""

from .fixtures import BindingTestHelper

__all__ = ['BindingTestHelper']

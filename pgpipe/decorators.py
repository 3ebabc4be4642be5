""" decorators.py
"""
import functools
import logging

from .errors import PipelineError

__all__ = ['LayerAction']


class LayerAction(object):
    """
    Guard an operation of a writer chain or one of its layers.

    Each keyword names an attribute of the object the decorated method is bound to, and the value that attribute must
    have for the operation to be allowed::

        @LayerAction(is_finalized=False)
        def write(self, data):
            ...
    """
    def __init__(self, **conditions):
        super(LayerAction, self).__init__()
        self.conditions = conditions

    def check_attributes(self, obj):
        for attr, expected in self.conditions.items():
            if getattr(obj, attr) != expected:
                raise PipelineError("{obj!r}: Expected: {attr:s} == {eval:s}. Got: {got:s}"
                                    "".format(obj=obj, attr=attr, eval=str(expected), got=str(getattr(obj, attr))))

    def __call__(self, action):
        @functools.wraps(action)
        def _action(obj, *args, **kwargs):
            try:
                self.check_attributes(obj)

            except PipelineError:
                logging.debug("refusing {action:s} on {obj!r}".format(action=action.__name__, obj=obj))
                raise

            return action(obj, *args, **kwargs)

        return _action

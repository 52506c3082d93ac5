# Copyright (c) 2023 Samuel J. McKelvie
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

class ChristieProjectorError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class ChristieProjectorConfigError(ChristieProjectorError):
  """The projector configuration is missing or invalid (e.g., no host set)."""
  pass

class ChristieProjectorConnectionError(ChristieProjectorError):
  """The projector closed the connection before the exchange finished."""
  pass

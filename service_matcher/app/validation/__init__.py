"""
Request validation package.

Pure checks over raw search inputs. A ``SearchRequest`` that leaves this
package is in range and is not re-validated downstream.
"""

from .request_validator import validate_search_request

__all__ = ["validate_search_request"]

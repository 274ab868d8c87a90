# Copyright (c) 2025 Kenneth Stott
#
# This source code is licensed under the Business Source License 1.1
# found in the LICENSE file in the root directory of this source tree.
#
# NOTICE: Use of this software for training artificial intelligence or
# machine learning models is strictly prohibited without explicit written
# permission from the copyright holder.

"""Base class for backend client factories."""

from abc import ABC, abstractmethod
from typing import Any


class ClientFactory(ABC):
    """Builds (or reuses) a client bound to one service identifier.

    A client exposes one awaitable method per operation, named by lowercasing
    the first character of the operation name (``DescribeInstances`` ->
    ``describeInstances``). Methods take the operation's input members as
    keyword arguments and return the response unmodified.
    """

    @property
    @abstractmethod
    def version(self) -> str:
        """Version string of the underlying client library."""
        ...

    @abstractmethod
    def get_client(self, service_identifier: str) -> Any:
        """Return a client for the service, constructing it on first use."""
        ...

# SPDX-License-Identifier: MIT

from typing import TypeAlias

EntityId: TypeAlias = str

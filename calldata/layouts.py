"""Cairo layouts.

A layout fixes which builtins an execution trace uses. The replay verifier
needs, per layout, the trace widths it decommits and the number of
out-of-domain-sampling values it expects.
"""

from dataclasses import dataclass
from enum import Enum

from calldata.errors import UnsupportedLayout
from primitives.field import encode_short_string


class Layout(Enum):
    """Enumerated layout names, as accepted by the runner and prover."""
    PLAIN = "plain"
    SMALL = "small"
    DEX = "dex"
    RECURSIVE = "recursive"
    STARKNET = "starknet"
    STARKNET_WITH_KECCAK = "starknet_with_keccak"
    RECURSIVE_LARGE_OUTPUT = "recursive_large_output"
    RECURSIVE_WITH_POSEIDON = "recursive_with_poseidon"
    ALL_SOLIDITY = "all_solidity"
    ALL_CAIRO = "all_cairo"
    DYNAMIC = "dynamic"

    @classmethod
    def from_name(cls, name: "str | Layout") -> "Layout":
        """Resolve a layout name; unknown names raise UnsupportedLayout."""
        if isinstance(name, Layout):
            return name
        try:
            return cls(name)
        except ValueError:
            raise UnsupportedLayout(str(name)) from None

    @property
    def short_string(self) -> int:
        """Felt encoding of the name, as carried in the public input."""
        return encode_short_string(self.value)


@dataclass(frozen=True)
class LayoutParams:
    """Verifier-side shape of a layout.

    Attributes:
        n_original_columns: Trace columns committed before interaction
        n_interaction_columns: Trace columns committed after interaction
        mask_size: Number of trace mask evaluations sampled out of domain
        constraint_degree: Composition polynomial degree (columns)
    """
    n_original_columns: int
    n_interaction_columns: int
    mask_size: int
    constraint_degree: int

    @property
    def n_oods_values(self) -> int:
        return self.mask_size + self.constraint_degree

    @property
    def row_width(self) -> int:
        """Decommitted elements per query across all three trace commitments."""
        return self.n_original_columns + self.n_interaction_columns + self.constraint_degree


# Layouts the split verifier contracts are deployed for
LAYOUT_PARAMS: dict[Layout, LayoutParams] = {
    Layout.DEX: LayoutParams(21, 1, 200, 2),
    Layout.RECURSIVE: LayoutParams(7, 3, 133, 2),
    Layout.RECURSIVE_WITH_POSEIDON: LayoutParams(6, 2, 192, 2),
    Layout.SMALL: LayoutParams(23, 2, 201, 2),
    Layout.STARKNET: LayoutParams(9, 3, 271, 2),
    Layout.STARKNET_WITH_KECCAK: LayoutParams(12, 3, 734, 2),
}


def resolve_layout(name: "str | Layout") -> tuple[Layout, LayoutParams]:
    """Resolve a layout the verifier supports.

    Raises:
        UnsupportedLayout: If the name is unknown or has no verifier.
    """
    layout = Layout.from_name(name)
    params = LAYOUT_PARAMS.get(layout)
    if params is None:
        raise UnsupportedLayout(layout.value)
    return layout, params

"""Names of the runtime helpers that generated code calls.

The runtime installs these helpers on every component instance; the
compiler only refers to them by name. Every emission site, including the
default plugins, reads names from one `Intrinsics` value so a runtime with
a different naming convention only needs a different instance::

    >>> Intrinsics().create
    '_c'
    >>> Intrinsics(create="h").create
    'h'

"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Intrinsics:
    """Runtime helper names, grouped by what they build."""

    # Node creation
    create: str = "_c"
    text: str = "_v"
    empty: str = "_e"
    to_string: str = "_s"
    to_number: str = "_n"

    # Structure
    render_list: str = "_l"
    render_static: str = "_m"
    mark_once: str = "_o"
    render_slot: str = "_t"
    resolve_scoped_slots: str = "_u"

    # Data-object merging
    bind_dynamic_keys: str = "_d"
    bind_object_props: str = "_b"
    bind_object_listeners: str = "_g"
    prepend_modifier: str = "_p"

    # Event and v-model helpers
    check_key_codes: str = "_k"
    loose_equal: str = "_q"
    loose_index_of: str = "_i"
    set: str = "$set"
    force_update: str = "$forceUpdate"


DEFAULT_INTRINSICS = Intrinsics()

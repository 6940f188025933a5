"""Shared type aliases."""

from typing import Any, Callable, Dict, Generic, List, TypeAlias, TypedDict, TypeVar, Union

S = TypeVar("S")
A = TypeVar("A")
T = TypeVar("T")

# Plain old data record: string keys, anything as values
Pojo: TypeAlias = Dict[str, Any]

# Anything json.loads can return
JSONValue: TypeAlias = Union[None, bool, int, float, str, List["JSONValue"], Dict[str, "JSONValue"]]
JSONObject: TypeAlias = Dict[str, JSONValue]


class ReducerAction(TypedDict, Generic[T]):
    """Basic reducer action."""

    value: T
    type: str


# Reducer given to a state container: (previous_state, action) -> next_state
Reducer: TypeAlias = Callable[[S, A], S]

# Dispatch function handed out by a state container
Dispatch: TypeAlias = Callable[[A], None]

"""Unified data models for endpoint descriptors.

Validation rules, endpoints and the bearer auth block are parsed into these
models before any compilation happens. Rules are a tagged union on ``type``;
a rule position may also hold a list of alternative rules, in which case the
first one is the representative used for every value derivation.

Rule fields are lenient: a value of the wrong shape (``values: "a"``,
``length: 2.5``, an object ``schema`` given as a list...) is replaced with
``None`` so the endpoint still compiles, degrading to ``null`` or an empty
container.
"""

from typing import Annotated, Any, Callable, Literal, Union

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    ValidationError,
    ValidatorFunctionWrapHandler,
    WrapValidator,
    field_validator,
    model_validator,
)

RULE_TYPES = ("string", "number", "boolean", "object", "array")
CONTAINER_TYPES = ("object", "array")


def _or_none(value: Any, handler: ValidatorFunctionWrapHandler) -> Any:
    try:
        return handler(value)
    except ValidationError:
        return None


def _mapping_values(value: Any) -> Any:
    # an array schema keyed by index or name is read in insertion order
    if isinstance(value, dict):
        return list(value.values())
    return value


Lenient = WrapValidator(_or_none)


class RuleBase(BaseModel):
    """Fields shared by every validation rule.

    Constraint fields the compiler does not use (``min``, ``pattern``,
    ``optional``...) are kept as extras so they end up in descriptions.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    default: Any = None
    values: Annotated[list[Any] | None, Lenient] = None

    def has_default(self) -> bool:
        """True when ``default`` was given and is a concrete value, not a factory."""
        return "default" in self.model_fields_set and not callable(self.default)


class StringRule(RuleBase):
    type: Literal["string"] = "string"


class NumberRule(RuleBase):
    type: Literal["number"] = "number"
    integer: Annotated[bool | None, Lenient] = False


class BooleanRule(RuleBase):
    type: Literal["boolean"] = "boolean"


class ObjectRule(RuleBase):
    type: Literal["object"] = "object"
    schema_: "Annotated[dict[str, LenientNode] | None, Lenient]" = Field(default=None, alias="schema")
    nested: "LenientNode" = None
    length: Annotated[int | None, Lenient] = None


class ArrayRule(RuleBase):
    type: Literal["array"] = "array"
    schema_: "Annotated[list[LenientNode] | None, BeforeValidator(_mapping_values), Lenient]" = Field(
        default=None, alias="schema"
    )
    nested: "LenientNode" = None
    length: Annotated[int | None, Lenient] = None


class AnyRule(RuleBase):
    """A rule with a missing or unrecognised ``type``."""

    type: Annotated[str | None, Lenient] = None


def _rule_tag(value: Any) -> str:
    kind = value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    return kind if isinstance(kind, str) and kind in RULE_TYPES else "any"


ValidationRule = Annotated[
    Union[
        Annotated[StringRule, Tag("string")],
        Annotated[NumberRule, Tag("number")],
        Annotated[BooleanRule, Tag("boolean")],
        Annotated[ObjectRule, Tag("object")],
        Annotated[ArrayRule, Tag("array")],
        Annotated[AnyRule, Tag("any")],
    ],
    Discriminator(_rule_tag),
]

RuleNode = Union[ValidationRule, list[ValidationRule]]

# a rule position that cannot be parsed at all holds None
LenientNode = Annotated[RuleNode | None, Lenient]

ObjectRule.model_rebuild()
ArrayRule.model_rebuild()


def representative(node: RuleNode | None) -> RuleBase | None:
    """Return the rule used for value derivation: the first of a list of alternatives."""
    if isinstance(node, list):
        return node[0] if node else None
    return node


def is_container(rule: Any) -> bool:
    return isinstance(rule, (ObjectRule, ArrayRule))


class BearerToken(BaseModel):
    key: Literal["token"] = "token"
    value: str
    type: Literal["string"] = "string"


class Auth(BaseModel):
    """The single auth shape a request item may carry."""

    type: Literal["bearer"] = "bearer"
    bearer: list[BearerToken]


def bearer_auth(token: str) -> Auth:
    """Build a bearer auth block, usually with a ``{{variable}}`` token."""
    return Auth(bearer=[BearerToken(value=token)])


class Endpoint(BaseModel):
    """A single HTTP endpoint and the rule trees describing its inputs."""

    path: str  # /users/:id(\d+)/orders
    method: str = "GET"
    params: dict[str, LenientNode] = {}
    param_order: list[str] | None = None
    query: dict[str, LenientNode] | None = None
    body: LenientNode = None
    body_type: Literal["json", "multipart"] | None = None

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: str) -> str:
        return value.upper()

    @model_validator(mode="after")
    def _default_param_order(self) -> "Endpoint":
        if self.param_order is None:
            self.param_order = list(self.params)
        return self


AuthBuilder = Callable[[Endpoint], Auth | None]

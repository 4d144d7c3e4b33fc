"""
Change Proposal Models

Typed records for the structured edits Claude proposes. The ``details``
payload is resolved by ``type``. Unknown tags and payloads that do not fit the
typed shape are kept as-is with the generic variant.
"""

from enum import Enum
from typing import Any, Dict, List, Optional, Type, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializeAsAny,
    ValidationError,
    ValidationInfo,
    field_validator,
)


class ChangeType(str, Enum):
    """Kinds of change Claude may propose."""
    UPDATE_BID = "update_bid"
    SELECT_BID = "select_bid"
    ADD_MARKUP = "add_markup"
    UPDATE_ESTIMATE = "update_estimate"
    CREATE_PACKAGE = "create_package"
    ASSIGN_ITEMS = "assign_items"


class ProposalDetails(BaseModel):
    """Open payload; also the catch-all for unrecognized shapes."""
    model_config = ConfigDict(extra="allow")


class UpdateBidDetails(ProposalDetails):
    bid_id: Optional[str] = None
    amount: Optional[float] = None


class SelectBidDetails(ProposalDetails):
    bid_item_id: Optional[str] = None
    bid_id: Optional[str] = None


class AddMarkupDetails(ProposalDetails):
    percent: Optional[float] = None
    bid_item_ids: List[str] = Field(default_factory=list)


class UpdateEstimateDetails(ProposalDetails):
    bid_item_id: Optional[str] = None
    estimated_cost: Optional[float] = None


class CreatePackageDetails(ProposalDetails):
    name: Optional[str] = None
    description: Optional[str] = None
    bid_item_ids: List[str] = Field(default_factory=list)


class AssignItemsDetails(ProposalDetails):
    package_id: Optional[str] = None
    bid_item_ids: List[str] = Field(default_factory=list)


DETAILS_BY_TYPE: Dict[ChangeType, Type[ProposalDetails]] = {
    ChangeType.UPDATE_BID: UpdateBidDetails,
    ChangeType.SELECT_BID: SelectBidDetails,
    ChangeType.ADD_MARKUP: AddMarkupDetails,
    ChangeType.UPDATE_ESTIMATE: UpdateEstimateDetails,
    ChangeType.CREATE_PACKAGE: CreatePackageDetails,
    ChangeType.ASSIGN_ITEMS: AssignItemsDetails,
}


class ChangeProposal(BaseModel):
    """A proposed edit to project or bid data, pending user approval."""
    type: Union[ChangeType, str] = Field(
        ..., union_mode="left_to_right", description="Kind of change; unknown tags are kept as text"
    )
    description: str = Field(..., description="Human-readable summary")
    target: Optional[str] = Field(None, description="What is being changed")
    current_value: Optional[Any] = Field(None, description="Value today")
    new_value: Optional[Any] = Field(None, description="Value after the change")
    details: SerializeAsAny[ProposalDetails] = Field(default_factory=dict, validate_default=True)

    @field_validator("details", mode="before")
    @classmethod
    def resolve_details(cls, value: Any, info: ValidationInfo) -> ProposalDetails:
        if value is None:
            value = {}
        if isinstance(value, ProposalDetails):
            return value
        if not isinstance(value, dict):
            raise ValueError("details must be an object")

        details_cls = DETAILS_BY_TYPE.get(info.data.get("type"), ProposalDetails)
        try:
            return details_cls.model_validate(value)
        except ValidationError:
            return ProposalDetails.model_validate(value)

    @property
    def type_tag(self) -> str:
        """The type tag as sent, whether or not it is a known ChangeType."""
        return self.type.value if isinstance(self.type, ChangeType) else self.type

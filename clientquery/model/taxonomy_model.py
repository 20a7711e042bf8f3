"""Taxonomy Model Classes

Pydantic models for the term store objects reported by the taxonomy endpoints.
Field aliases match the server property names so ``model_dump(by_alias=True)``
yields the object as the server describes it.
"""

from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field


class TermSet(BaseModel):
    """A taxonomy term set."""
    model_config = ConfigDict(populate_by_name=True, extra='allow')

    created_date: Optional[str] = Field(None, alias="CreatedDate", description="Creation timestamp (ISO-8601)")
    id: Optional[str] = Field(None, alias="Id", description="Term set GUID")
    last_modified_date: Optional[str] = Field(None, alias="LastModifiedDate", description="Last modification timestamp (ISO-8601)")
    name: str = Field(..., alias="Name", description="Term set name")
    custom_properties: Dict[str, str] = Field(default_factory=dict, alias="CustomProperties")
    custom_sort_order: Optional[str] = Field(None, alias="CustomSortOrder")
    is_available_for_tagging: Optional[bool] = Field(None, alias="IsAvailableForTagging")
    owner: Optional[str] = Field(None, alias="Owner")
    contact: Optional[str] = Field(None, alias="Contact")
    description: Optional[str] = Field(None, alias="Description")
    is_open_for_term_creation: Optional[bool] = Field(None, alias="IsOpenForTermCreation")
    names: Dict[str, str] = Field(default_factory=dict, alias="Names", description="Localized names keyed by LCID")
    stakeholders: List[str] = Field(default_factory=list, alias="Stakeholders")

    def to_output(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class TermGroup(BaseModel):
    """A taxonomy term group."""
    model_config = ConfigDict(populate_by_name=True, extra='allow')

    name: str = Field(..., alias="Name", description="Term group name")
    id: Optional[str] = Field(None, alias="Id", description="Term group GUID")
    description: Optional[str] = Field(None, alias="Description")

    def to_output(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)

from typing import List, Optional
from sqlmodel import Field, Relationship, SQLModel, UniqueConstraint
from cmdmanifest.models.base import CreatedAtMixin


class CommandRecord(CreatedAtMixin, table=True):
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)

    summary: str = Field(default="", description="Short synopsis; first choice for the tool description gate")
    description: Optional[str] = Field(default=None, description="Long-form help text")

    parameter_sets: List["ParameterSetRecord"] = Relationship(
        back_populates="command",
        sa_relationship_kwargs={"order_by": "ParameterSetRecord.ordinal", "cascade": "all, delete-orphan"},
    )


class ParameterSetRecord(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("command_id", "ordinal", name="uq_parameter_set_command_ordinal"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    command_id: int = Field(foreign_key="commandrecord.id", index=True)
    ordinal: int = Field(description="Position of the set within its command, starting at 0")
    name: str

    command: Optional[CommandRecord] = Relationship(back_populates="parameter_sets")
    parameters: List["ParameterRecord"] = Relationship(
        back_populates="parameter_set",
        sa_relationship_kwargs={"order_by": "ParameterRecord.position", "cascade": "all, delete-orphan"},
    )


class ParameterRecord(SQLModel, table=True):
    __table_args__ = (
        UniqueConstraint("parameter_set_id", "name", name="uq_parameter_set_name"),
        {"extend_existing": True},
    )

    id: Optional[int] = Field(default=None, primary_key=True)
    parameter_set_id: int = Field(foreign_key="parametersetrecord.id", index=True)
    position: int = Field(description="Declaration order within the parameter set")

    name: str
    type_name: str = Field(default="String", description="Native type tag, e.g. 'Int32'")
    mandatory: bool = Field(default=False)
    help_text: Optional[str] = Field(default=None, description="Per-parameter help; None when undocumented")

    parameter_set: Optional[ParameterSetRecord] = Relationship(back_populates="parameters")

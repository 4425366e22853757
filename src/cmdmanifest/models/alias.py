from typing import Optional
from sqlmodel import Field
from cmdmanifest.models.base import CreatedAtMixin


class CommandAlias(CreatedAtMixin, table=True):
    """Maps an alternate name to the command (or another alias) it stands for.

    Targets are stored by name, not id, so an alias may be registered before
    its command and may point at another alias.
    """
    __table_args__ = {"extend_existing": True}

    id: Optional[int] = Field(default=None, primary_key=True)
    alias: str = Field(index=True, unique=True, description="Alternate name, e.g. 'add'")
    target: str = Field(description="Name the alias resolves to")

"""Project-level specification types: IP access list entries and private endpoints."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from atlaskube.common import json_field, to_json_dict
from atlaskube.provider import ProviderName


@dataclass(frozen=True)
class IPAccessList:
    """One entry of a project's IP access list."""

    aws_security_group: str = json_field("awsSecurityGroup", omitempty=True, default="")
    cidr_block: str = json_field("cidrBlock", omitempty=True, default="")
    comment: str = json_field("comment", omitempty=True, default="")
    delete_after_date: str = json_field("deleteAfterDate", omitempty=True, default="")
    ip_address: str = json_field("ipAddress", omitempty=True, default="")

    def to_atlas(self) -> dict[str, Any]:
        """Return the entry in the Atlas API's JSON form."""
        return to_json_dict(self)

    def identifier(self) -> str:
        """Return the entry's identity; only one of its address fields is expected to be set."""
        return self.cidr_block + self.aws_security_group + self.ip_address

    def with_comment(self, comment: str) -> IPAccessList:
        return replace(self, comment=comment)

    def with_ip(self, ip: str) -> IPAccessList:
        return replace(self, ip_address=ip)

    def with_cidr(self, cidr: str) -> IPAccessList:
        return replace(self, cidr_block=cidr)

    def with_aws_group(self, group: str) -> IPAccessList:
        return replace(self, aws_security_group=group)

    def with_delete_after_date(self, date: str) -> IPAccessList:
        return replace(self, delete_after_date=date)


@dataclass(frozen=True)
class PrivateEndpoint:
    """A private endpoint requested for a project."""

    provider: ProviderName = json_field("provider")
    region: str = json_field("region")
    id: str = json_field("id", omitempty=True, default="")
    ip: str = json_field("ip", omitempty=True, default="")

    def to_atlas(self) -> dict[str, Any]:
        """Return the endpoint in the Atlas API's JSON form."""
        return to_json_dict(self)
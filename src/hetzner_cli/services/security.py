from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Literal

from hetzner_cli.models.actions import Action
from hetzner_cli.models.cloud import Certificate, PlacementGroup, SSHKey
from hetzner_cli.services.base import CloudResourceService, parse_response


class SSHKeysService(CloudResourceService[SSHKey]):
    path = "/ssh_keys"
    list_key = "ssh_keys"
    item_key = "ssh_key"
    model = SSHKey

    async def create(self, *, name: str, public_key: str, labels: Mapping[str, str] | None = None) -> SSHKey:
        data = await self._create(
            {"name": name, "public_key": public_key, "labels": dict(labels) if labels is not None else None}
        )
        return parse_response(SSHKey, data, "ssh_key")


class CertificatesService(CloudResourceService[Certificate]):
    path = "/certificates"
    list_key = "certificates"
    item_key = "certificate"
    model = Certificate

    async def create(
        self,
        *,
        name: str,
        certificate_type: Literal["uploaded", "managed"] = "uploaded",
        certificate: str | None = None,
        private_key: str | None = None,
        domain_names: Sequence[str] | None = None,
        labels: Mapping[str, str] | None = None,
    ) -> tuple[Certificate, Action | None]:
        data = await self._create(
            {
                "name": name,
                "type": certificate_type,
                "certificate": certificate,
                "private_key": private_key,
                "domain_names": list(domain_names) if domain_names is not None else None,
                "labels": dict(labels) if labels is not None else None,
            }
        )
        action = parse_response(Action, data, "action") if data.get("action") else None
        return parse_response(Certificate, data, "certificate"), action


class PlacementGroupsService(CloudResourceService[PlacementGroup]):
    path = "/placement_groups"
    list_key = "placement_groups"
    item_key = "placement_group"
    model = PlacementGroup

    async def create(
        self,
        *,
        name: str,
        group_type: Literal["spread"] = "spread",
        labels: Mapping[str, str] | None = None,
    ) -> PlacementGroup:
        data = await self._create(
            {"name": name, "type": group_type, "labels": dict(labels) if labels is not None else None}
        )
        return parse_response(PlacementGroup, data, "placement_group")

"""Convert proposal statuses to and from their tagged JSON objects.

The generic shape is ``{"state": <discriminator>, <fields>...}``. The nested
shape keys the fields by the discriminator instead: ``{<discriminator>: {<fields>...}}``.
Field emission order is a wire contract because the line rewriters match on it.
"""
from __future__ import annotations

from typing import Any, Mapping

from evolution_metadata.errors import DecodeError
from evolution_metadata.proposal_status import STATE_FIELDS, ProposalStatus, unknown_status

DISCRIMINATOR_KEY = "state"


def decode_status(payload: Mapping[str, Any]) -> ProposalStatus:
    state = payload.get(DISCRIMINATOR_KEY)
    if not isinstance(state, str):
        raise DecodeError.missing_discriminator(DISCRIMINATOR_KEY)

    field_names = STATE_FIELDS.get(state)
    if field_names is None:
        return unknown_status(state)

    values: dict[str, str] = {}
    for name in field_names:
        value = payload.get(name)
        if not isinstance(value, str):
            raise DecodeError.missing_field(name, state)
        values[name] = value
    return ProposalStatus(state, **values)


def encode_status(status: ProposalStatus) -> dict[str, str]:
    encoded = {DISCRIMINATOR_KEY: status.state}
    encoded.update(status.fields)
    return encoded


def encode_status_nested(status: ProposalStatus) -> dict[str, dict[str, str]]:
    return {status.state: status.fields}

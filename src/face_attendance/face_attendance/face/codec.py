"""Face descriptor wire formats.

Descriptors reach the server in several shapes depending on the client:

* ``"[0.1, -0.2, ...]"``: JSON array text,
* ``'{"0": 0.1, "1": -0.2, ...}'``: a typed array serialised with JSON.stringify,
* ``"0.1,-0.2,..."``: comma-separated text,
* an already structured sequence (list, tuple, numpy array).

All of them decode to the same immutable tuple of floats.
"""
from __future__ import annotations

import json
import math
from numbers import Real
from typing import Any, Optional, Sequence

import numpy as np

from ..core.constants import DESCRIPTOR_LENGTH
from ..core.enums import DescriptorFormat
from ..core.exceptions import DecodeError
from .model import FaceDescriptor

_USE_DEFAULT = object()


class DescriptorCodec:
    def __init__(self, *, expected_length: Optional[int] = DESCRIPTOR_LENGTH):
        self._expected_length = expected_length

    def decode(self, raw: Any, *, expected_length: Any = _USE_DEFAULT) -> FaceDescriptor:
        """Decode ``raw`` into a descriptor.

        ``expected_length=None`` skips the length check; roster entries are read
        that way so a single bad row is scored as non-matching instead of failing
        the whole scan.
        """

        if expected_length is _USE_DEFAULT:
            expected_length = self._expected_length

        if raw is None:
            raise DecodeError("Face descriptor is required")

        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode("utf-8", errors="replace")

        if isinstance(raw, str):
            values = self._parse_text(raw)
        elif isinstance(raw, np.ndarray):
            if raw.ndim != 1:
                raise DecodeError("Face descriptor must be a flat sequence")
            values = raw.tolist()
        elif isinstance(raw, (list, tuple)):
            values = list(raw)
        else:
            raise DecodeError(f"Unsupported face descriptor type: {type(raw).__name__}")

        descriptor = self._to_descriptor(values)

        if expected_length is not None and len(descriptor) != expected_length:
            raise DecodeError(
                f"Face descriptor must have {expected_length} values, got {len(descriptor)}"
            )
        return descriptor

    def encode(self, descriptor: Sequence[float], fmt: DescriptorFormat = DescriptorFormat.JSON) -> Any:
        values = [float(v) for v in descriptor]
        fmt = DescriptorFormat(fmt)
        if fmt is DescriptorFormat.CSV:
            return ",".join(repr(v) for v in values)
        if fmt is DescriptorFormat.JSON:
            return json.dumps(values)
        if fmt is DescriptorFormat.OBJECT:
            return json.dumps({str(i): v for i, v in enumerate(values)})
        return values

    def _parse_text(self, text: str) -> list:
        text = text.strip()
        if not text:
            raise DecodeError("Face descriptor is empty")

        if text.startswith("[") or text.startswith("{"):
            try:
                parsed = json.loads(text)
            except ValueError as exc:
                raise DecodeError(f"Face descriptor is not valid JSON: {exc}") from exc
            if isinstance(parsed, dict):
                return self._from_index_object(parsed)
            if not isinstance(parsed, list):
                raise DecodeError("Face descriptor JSON must be an array")
            return parsed

        values = []
        for token in text.split(","):
            token = token.strip()
            if not token:
                raise DecodeError("Face descriptor contains an empty value")
            try:
                values.append(float(token))
            except ValueError:
                raise DecodeError(f"Face descriptor contains a non-numeric value: {token!r}")
        return values

    @staticmethod
    def _from_index_object(obj: dict) -> list:
        try:
            indexed = sorted(((int(k), v) for k, v in obj.items()), key=lambda kv: kv[0])
        except (TypeError, ValueError):
            raise DecodeError("Face descriptor object keys must be indexes")
        if [i for i, _ in indexed] != list(range(len(indexed))):
            raise DecodeError("Face descriptor object indexes must be contiguous from 0")
        return [v for _, v in indexed]

    @staticmethod
    def _to_descriptor(values: list) -> FaceDescriptor:
        if not values:
            raise DecodeError("Face descriptor is empty")

        out = []
        for v in values:
            if isinstance(v, (bool, np.bool_)) or not isinstance(v, (Real, np.number)):
                raise DecodeError("Face descriptor must contain only numbers")
            try:
                f = float(v)
            except (OverflowError, ValueError):
                raise DecodeError("Face descriptor contains an out-of-range value")
            if not math.isfinite(f):
                raise DecodeError("Face descriptor contains NaN or infinite values")
            out.append(f)
        return tuple(out)

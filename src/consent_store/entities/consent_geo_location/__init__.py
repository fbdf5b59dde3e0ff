# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Consent geo location entity."""

from .table import ConsentGeoLocationEntity

__all__ = ["ConsentGeoLocationEntity"]

#!/usr/bin/env python3
"""
KUBELOCATE LOCATOR PARSER
-------------------------
Turns locator text into a structured Locator:

    kubernetes:apps/v1/deployment/my-ns/my-app?port-name=my-custom-port
    kubernetes:v1/service/my-ns/my-svc

The apiVersion is either a bare version ('v1') or 'group/version', so the
path carries four or five segments.

Author: KubeLocate Team
Date: 2026-10-19
"""

import re
import logging
from typing import Dict, List

from kubelocate.core.errors import LocatorParseError
from kubelocate.core.models import Locator

logger = logging.getLogger("kubelocate.parser")


class LocatorParser:
    """
    Stateless parser. One instance can be shared between threads.
    """

    # Group 1: scheme, Group 2: path, Group 3: query (without '?')
    LOCATOR_PATTERN = re.compile(r'^([^:/?]*):([^?]*)(?:\?(.*))?$')
    # v1, v2, v1beta1, v2alpha3 ...
    VERSION_PATTERN = re.compile(r"^v\d+(?:(?:alpha|beta)\d+)?$")

    def parse(self, text: str) -> Locator:
        if text is None:
            raise LocatorParseError("", "locator text is missing")

        raw = text.strip()
        match = self.LOCATOR_PATTERN.match(raw)
        if not match:
            raise LocatorParseError(raw, "expected '<scheme>:<apiVersion>/<kind>/<namespace>/<name>'")

        scheme, path, query = match.groups()
        if not scheme:
            raise LocatorParseError(raw, "scheme is missing")

        api_version, kind, namespace, name = self._split_path(raw, path)
        params = self._parse_query(raw, query)

        locator = Locator(
            scheme=scheme,
            api_version=api_version,
            kind=kind.lower(),
            namespace=namespace,
            name=name,
            query_params=params,
        )
        logger.debug(f"Parsed locator {locator}")
        return locator

    def _split_path(self, raw: str, path: str) -> List[str]:
        segments = path.split("/")

        if len(segments) == 5:
            group, version = segments[0], segments[1]
            if not group or not version:
                raise LocatorParseError(raw, "apiVersion is missing or empty")
            if not self.VERSION_PATTERN.match(version):
                # v1/pod/ns/name/extra would otherwise read as group 'v1'
                raise LocatorParseError(raw, f"'{version}' is not an API version")
            segments = [f"{group}/{version}"] + segments[2:]
        elif len(segments) != 4:
            raise LocatorParseError(
                raw, f"expected 4 or 5 path segments after the scheme, found {len(segments)}"
            )
        elif segments[0] and not self.VERSION_PATTERN.match(segments[0]):
            # apps/v1/deployment/app reads as four segments
            raise LocatorParseError(raw, "namespace or name segment is missing")

        for label, value in zip(("apiVersion", "kind", "namespace", "name"), segments):
            if not value:
                raise LocatorParseError(raw, f"{label} is missing or empty")
        return segments

    def _parse_query(self, raw: str, query: str) -> Dict[str, str]:
        params: Dict[str, str] = {}
        if not query:
            return params

        for token in query.split("&"):
            key, sep, value = token.partition("=")
            if not sep or not key:
                raise LocatorParseError(raw, f"malformed query parameter '{token}'")
            params[key] = value
        return params


_default_parser = LocatorParser()


def parse_locator(text: str) -> Locator:
    """Convenience wrapper around a shared LocatorParser."""
    return _default_parser.parse(text)

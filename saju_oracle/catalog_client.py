from __future__ import annotations

import json
from dataclasses import dataclass
from urllib.error import HTTPError, URLError
from urllib.request import urlopen

from .errors import CatalogUnavailableError
from .models import CatalogItem
from .packages.catalog.registry import catalog_item_from_row


class CatalogSourceUnavailableError(CatalogUnavailableError):
    pass


class CatalogResponseError(CatalogUnavailableError):
    pass


@dataclass(frozen=True)
class HttpCatalogSource:
    base_url: str
    timeout_s: float = 10.0

    @property
    def name(self) -> str:
        return f"http:{self.base_url}"

    def list_categories(self) -> list[CatalogItem]:
        url = f"{self.base_url}/api/saju/categories"
        try:
            with urlopen(url, timeout=self.timeout_s) as resp:  # nosec B310
                payload = json.loads(resp.read().decode("utf-8"))
        except HTTPError as exc:
            raise CatalogResponseError(f"http_status={exc.code}") from exc
        except URLError as exc:
            reason = getattr(exc, "reason", exc)
            raise CatalogSourceUnavailableError(f"catalog_api_unreachable:{reason}") from exc
        except TimeoutError as exc:
            raise CatalogSourceUnavailableError("catalog_api_timeout") from exc
        except json.JSONDecodeError as exc:
            raise CatalogResponseError("catalog_api_invalid_json") from exc

        rows = payload.get("categories") if isinstance(payload, dict) else payload
        if not isinstance(rows, list):
            raise CatalogResponseError("catalog_api_bad_shape")
        try:
            return [catalog_item_from_row(it) for it in rows]
        except (KeyError, TypeError, ValueError) as exc:
            raise CatalogResponseError(f"catalog_api_bad_row:{exc}") from exc

"""Listing query engine shared by every list endpoint.

A ``ResourceDescriptor`` declares, for one model, which query parameters
filter which fields, which text fields a search looks at and which named
sort modes exist. ``run_listing`` turns request parameters into a single
queryset and returns the selected rows together with the unpaged total.

Rules every listing follows:

1. Filters and search are combined with AND; search fields with OR.
2. Unknown filter keys and unknown sort modes are ignored.
3. An invalid ``limit`` (non-integer, not positive or beyond MAX_LIMIT) means no limit.
4. Every ordering ends on the primary key so repeated calls agree.
"""

import logging
import operator
from dataclasses import dataclass, field
from functools import reduce
from typing import Any, Callable, Dict, List, Optional, Tuple

from django.db.models import Q

logger = logging.getLogger(__name__)

# largest LIMIT the database drivers accept
MAX_LIMIT = 2**63 - 1


def parse_bool(raw) -> bool:
    return str(raw).strip().lower() == 'true'


def parse_limit(raw) -> Optional[int]:
    if raw is None:
        return None
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if 0 < value <= MAX_LIMIT else None


@dataclass(frozen=True)
class FilterField:
    field: str
    parse: Callable[[str], Any] = str.strip


@dataclass(frozen=True)
class ResourceDescriptor:
    name: str
    model: Any
    filters: Dict[str, FilterField]
    search_fields: Tuple[str, ...]
    sort_modes: Dict[str, Tuple[str, ...]]
    default_sort: Tuple[str, ...]

    def ordering(self, mode: Optional[str]) -> Tuple[str, ...]:
        keys = self.sort_modes.get(mode, self.default_sort) if mode else self.default_sort
        if not any(k.lstrip('-') in ('pk', 'id') for k in keys):
            keys = keys + ('-pk' if keys and keys[-1].startswith('-') else 'pk',)
        return keys

    def search_q(self, term: str) -> Q:
        return reduce(operator.or_, (Q(**{f'{name}__icontains': term}) for name in self.search_fields))


@dataclass
class ListingParams:
    filters: Dict[str, Any] = field(default_factory=dict)
    search: Optional[str] = None
    sort: Optional[str] = None
    limit: Optional[int] = None

    @classmethod
    def from_query(cls, query, descriptor: ResourceDescriptor) -> 'ListingParams':
        """Build params from a request's query dict; blank values count as absent."""
        filters = {}
        for param, flt in descriptor.filters.items():
            raw = query.get(param)
            if raw is None or str(raw).strip() == '':
                continue
            filters[flt.field] = flt.parse(raw)
        search = (query.get('search') or '').strip() or None
        sort = (query.get('sort') or '').strip() or None
        return cls(filters=filters, search=search, sort=sort, limit=parse_limit(query.get('limit')))


@dataclass
class ListingResult:
    items: List[Any]
    total: int

    @property
    def count(self) -> int:
        return len(self.items)


def run_listing(descriptor: ResourceDescriptor, params: ListingParams, queryset=None) -> ListingResult:
    qs = queryset if queryset is not None else descriptor.model.objects.all()
    if params.filters:
        qs = qs.filter(**params.filters)
    if params.search and descriptor.search_fields:
        qs = qs.filter(descriptor.search_q(params.search))

    total = qs.count()
    qs = qs.order_by(*descriptor.ordering(params.sort))
    if params.limit is not None:
        qs = qs[: params.limit]
    items = list(qs)

    logger.debug(
        'listing %s filters=%s search=%r sort=%s limit=%s -> %d/%d',
        descriptor.name, params.filters, params.search, params.sort, params.limit, len(items), total,
    )
    return ListingResult(items=items, total=total)

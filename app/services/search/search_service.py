"""Business search orchestration.

One request runs strictly in this order:

    validate -> ban/quota check -> cache lookup
        hit:  respond
        miss: geocode -> nearby search -> rank -> persist record + results,
              upsert cache, decrement quota (one transaction) -> respond
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any, Optional, Union

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.search_record import BusinessResult, SearchRecord
from app.schemas.search import (
    BusinessResultSchema,
    SearchCenter,
    SearchRequest,
    SearchResponse,
    parse_search_request,
)
from app.services.google_maps import Coordinates, GeocodingClient, PlacesClient
from app.services.quota_service import DenialReason, QuotaService
from app.services.search.cache_service import CachedSearch, CacheKey, SearchCacheService
from app.services.search.distance import RankedBusiness, rank_by_distance
from app.utils.errors import (
    InternalError,
    PermissionDeniedError,
    QuotaExhaustedError,
    UpstreamUnavailableError,
)
from app.utils.logger import get_logger
from app.utils.sentry_utils import capture_exception

logger = get_logger(__name__)


class SearchService:
    """Runs the search pipeline against injected collaborators.

    The database session is passed per call; everything else is fixed at
    construction so tests can substitute fakes for the HTTP clients.
    """

    def __init__(
        self,
        geocoding_client: GeocodingClient,
        places_client: PlacesClient,
        cache: Optional[SearchCacheService] = None,
        quota: Optional[QuotaService] = None,
    ):
        self.geocoding_client = geocoding_client
        self.places_client = places_client
        self.cache = cache or SearchCacheService()
        self.quota = quota or QuotaService()

    async def search(
        self,
        db: AsyncSession,
        user_id: int,
        request: Union[SearchRequest, Mapping[str, Any]],
        ip_address: Optional[str] = None,
    ) -> SearchResponse:
        """
        Search for businesses of a type around a city.

        Raises:
            InvalidArgumentError: Missing city/type or radius outside 1-100 km
            NotFoundError: Unknown user or the city could not be geocoded
            PermissionDeniedError: The user is banned
            QuotaExhaustedError: No searches left
            InternalError: An upstream service or the database failed
        """
        if not isinstance(request, SearchRequest):
            request = parse_search_request(request)

        decision = await self.quota.check_and_reserve(user_id, db)
        if not decision.allowed:
            if decision.reason is DenialReason.BANNED:
                raise PermissionDeniedError(
                    "Your account has been banned. Please contact support."
                )
            raise QuotaExhaustedError()

        key = CacheKey.from_query(request.city, request.business_type, request.radius_km)
        hit = await self.cache.get(key, db)
        if hit is not None:
            logger.info(f"Cache hit for '{key}' (age {hit.age.total_seconds():.0f}s)")
            return self._build_response(
                request=request,
                businesses=[BusinessResultSchema(**b) for b in hit.value.businesses],
                center=hit.value.center,
                remaining=decision.remaining,
                from_cache=True,
            )

        try:
            center = await self.geocoding_client.geocode(request.city)
            candidates = await self.places_client.nearby_search(
                center=center,
                radius_meters=int(request.radius_km * 1000),
                business_type=request.business_type,
            )
        except UpstreamUnavailableError as e:
            logger.error(f"Search for '{key}' failed upstream: {e}")
            capture_exception(e)
            raise InternalError(
                "An error occurred while searching for businesses. Please try again."
            ) from e

        ranked = rank_by_distance(center, candidates)

        remaining = await self._persist(
            db=db,
            user_id=user_id,
            request=request,
            key=key,
            center=center,
            ranked=ranked,
            ip_address=ip_address,
        )

        logger.info(
            f"User {user_id} searched '{key}': {len(ranked)} result(s), "
            f"{remaining} search(es) left"
        )
        return self._build_response(
            request=request,
            businesses=[BusinessResultSchema(**b.to_dict()) for b in ranked],
            center=center,
            remaining=remaining,
            from_cache=False,
        )

    async def _persist(
        self,
        db: AsyncSession,
        user_id: int,
        request: SearchRequest,
        key: CacheKey,
        center: Coordinates,
        ranked: list[RankedBusiness],
        ip_address: Optional[str],
    ) -> int:
        """Write record, results, cache entry and decrement in one transaction.

        Either all of it is committed or none of it is: a failed write never
        leaves a charged search without its record, or a record without the
        charge.
        """
        now = datetime.utcnow()
        try:
            record = SearchRecord(
                user_id=user_id,
                city=request.city,
                business_type=request.business_type,
                radius_km=request.radius_km,
                results_count=len(ranked),
                ip_address=ip_address,
                center_lat=center.lat,
                center_lng=center.lng,
                created_at=now,
            )
            record.results = [
                BusinessResult(position=position, **business.to_dict())
                for position, business in enumerate(ranked)
            ]
            db.add(record)
            await db.flush()

            await self.cache.put(
                key,
                CachedSearch(businesses=[b.to_dict() for b in ranked], center=center),
                db,
                now=now,
            )

            remaining = await self.quota.commit(user_id, db, now=now)
            await db.commit()
        except QuotaExhaustedError:
            await db.rollback()
            raise
        except SQLAlchemyError as e:
            await db.rollback()
            logger.error(f"Failed to persist search '{key}' for user {user_id}: {e}", exc_info=True)
            capture_exception(e)
            raise InternalError("Failed to save search results. Please try again.") from e

        return remaining

    @staticmethod
    def _build_response(
        request: SearchRequest,
        businesses: list[BusinessResultSchema],
        center: Coordinates,
        remaining: int,
        from_cache: bool,
    ) -> SearchResponse:
        if businesses:
            message = f"Found {len(businesses)} businesses in {request.city}"
        else:
            message = "No businesses found. Try different search criteria."

        return SearchResponse(
            businesses=businesses,
            search_center=SearchCenter(lat=center.lat, lng=center.lng),
            message=message,
            remaining_searches=remaining,
            total_results=len(businesses),
            from_cache=from_cache,
        )

# app/services/cascade.py
"""
Cascading deletes for services and users.

Each public call is one transaction on the entity store: the target row is
locked first, dependents are removed children-before-parents, and a failure
at any step rolls back every step before it.
"""
import logging

logger = logging.getLogger(__name__)


class CascadeDeletionManager:
    def __init__(self, store):
        self.store = store

    def delete_service(self, service_id: int) -> None:
        """Delete a service and all of its reviews.

        Raises NotFoundError if the service does not exist, and
        TransactionFailure if any step fails (nothing is deleted then).
        """
        store = self.store
        _, reviews_deleted, _ = store.run_transaction(
            [
                lambda: store.lock_service(service_id),
                lambda: store.delete_reviews(service_ids=[service_id]),
                lambda: store.delete_service(service_id),
            ]
        )
        logger.info("Deleted service %s with %d reviews", service_id, reviews_deleted)

    def delete_user(self, user_id: int) -> None:
        """Delete a user, the services it provides, every review on those
        services and every review it authored elsewhere."""
        store = self.store
        state = {}

        def collect_services():
            state["service_ids"] = [svc.id for svc in store.find_services(provider_id=user_id)]
            return state["service_ids"]

        def collect_reviewed_elsewhere():
            owned = set(state["service_ids"])
            state["reviewed_ids"] = sorted(
                {r.service_id for r in store.find_reviews(author_id=user_id)} - owned
            )
            return state["reviewed_ids"]

        results = store.run_transaction(
            [
                lambda: store.lock_user(user_id),
                collect_services,
                lambda: store.delete_reviews(service_ids=state["service_ids"]),
                lambda: store.delete_services_by_provider(user_id),
                collect_reviewed_elsewhere,
                lambda: store.delete_reviews(author_id=user_id),
                lambda: store.delete_user(user_id),
                # cached ratings of services that just lost this user's reviews
                lambda: store.refresh_service_rating(state["reviewed_ids"]),
            ]
        )
        logger.info(
            "Deleted user %s: %d services, %d reviews on them, %d authored reviews",
            user_id,
            results[3],
            results[2],
            results[5],
        )

# core/workflow/add_book.py
import logging
from typing import List, Optional, Union

from core import config
from core.collaborators import LibraryStore, SearchProvider
from core.errors import DuplicateSignal, NetworkError, PersistenceError, ValidationError
from core.models.library import LibraryEntry, ReadingStatus, SearchCandidate
from core.workflow import transitions
from core.workflow.mapping import build_entry
from core.workflow.states import Idle, Persisting, WorkflowState

logger = logging.getLogger(__name__)


class AddBookWorkflow:
    """Drives one add-book flow: search, pick, shelve, rate, save.

    The driver holds the current state and does the collaborator calls; every
    decision is made by the pure functions in ``transitions``. Each public method
    returns the new state. A ValidationError leaves the state untouched.
    """

    def __init__(
        self,
        search_provider: SearchProvider,
        store: LibraryStore,
        user_id: Optional[int] = None,
        max_results: int = config.SEARCH_MAX_RESULTS,
        state: Optional[WorkflowState] = None,
    ):
        """
        Args:
            search_provider: Where candidates come from
            store: Library persistence (list for the duplicate check, create to save)
            user_id: Owner of the entries this workflow creates
            max_results: How many candidates to ask the provider for
            state: State to resume from (default: Idle)
        """
        self.search_provider = search_provider
        self.store = store
        self.user_id = user_id
        self.max_results = max_results
        self.state: WorkflowState = state or Idle()
        self._saving = False

    @property
    def results(self) -> List[SearchCandidate]:
        return list(getattr(self.state, 'results', ()))

    def search(self, query: str) -> WorkflowState:
        previous = self.state
        self.state = transitions.start_search(self.state, query)
        try:
            results = self.search_provider.search(self.state.query, self.max_results)
        except NetworkError as e:
            self.state = transitions.search_failed(self.state, e.message)
            return self.state
        except Exception:
            self.state = previous
            raise
        self.state = transitions.search_succeeded(self.state, results)
        return self.state

    def select(self, choice: Union[int, SearchCandidate]) -> WorkflowState:
        self.state = transitions.select_candidate(self.state, choice)
        return self.state

    def choose_status(self, status: Union[str, ReadingStatus]) -> WorkflowState:
        next_state = transitions.choose_status(self.state, status)
        if isinstance(next_state, Persisting):
            return self._persist(next_state)
        self.state = next_state
        return self.state

    def submit_rating(self, rating: Optional[float] = None, review: Optional[str] = None) -> WorkflowState:
        return self._persist(transitions.submit_rating(self.state, rating, review))

    def retry(self) -> WorkflowState:
        return self._persist(transitions.retry(self.state))

    def acknowledge(self) -> WorkflowState:
        self.state = transitions.acknowledge(self.state)
        return self.state

    def cancel(self) -> WorkflowState:
        self.state = transitions.cancel(self.state)
        return self.state

    def _persist(self, pending: Persisting) -> WorkflowState:
        if self._saving:
            raise ValidationError("A book is already being saved")
        self._saving = True
        self.state = pending
        try:
            self.state = self._save(pending)
        except Exception:
            # Unexpected errors propagate, but never leave the flow stuck mid-save
            self.state = pending.resume
            raise
        finally:
            self._saving = False
        return self.state

    def _save(self, pending: Persisting) -> WorkflowState:
        try:
            library = self.store.list_entries(user_id=self.user_id)
            transitions.check_duplicate(pending, library)
            entry: LibraryEntry = self.store.create_entry(
                build_entry(pending.candidate, pending.status, pending.rating, pending.review, self.user_id)
            )
        except DuplicateSignal as signal:
            logger.info("'%s' is already in the library as entry %s", pending.candidate.title, signal.existing.id)
            return transitions.duplicate_found(pending, signal.existing)
        except PersistenceError as e:
            logger.warning("Saving '%s' failed: %s", pending.candidate.title, e.message)
            return transitions.persist_failed(pending, e.message)
        return transitions.persisted(pending, entry)

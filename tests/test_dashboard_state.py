from business_records import filter_by_industry
from dashboard_state import DashboardState, Lifecycle, parse_index
from position_store import FILTER_KEY, INDEX_KEY, INDUSTRY_PARAM, MemoryStore


class BrokenStore:
    def get(self, key):
        raise RuntimeError("storage disabled")

    def set(self, key, value):
        raise RuntimeError("quota exceeded")

    def remove(self, key):
        raise RuntimeError("storage disabled")


def _hydrated(records, storage=None, url_params=None):
    state = DashboardState(storage=storage, url_params=url_params).start()
    state.attach(records)
    return state


def test_lifecycle_transitions(records, storage):
    state = DashboardState(storage=storage)
    assert state.lifecycle is Lifecycle.UNINITIALIZED

    state.start()
    assert state.lifecycle is Lifecycle.HYDRATING

    state.attach(records)
    assert state.lifecycle is Lifecycle.HYDRATED


def test_stored_index_restores_third_row(records):
    storage = MemoryStore({INDEX_KEY: "2"})
    state = _hydrated(records, storage)

    assert state.index == 2
    assert state.current.business_name == "Gamma Bakery"


def test_stored_index_is_clamped(records):
    state = _hydrated(records, MemoryStore({INDEX_KEY: "99"}))
    assert state.index == 3

    state = _hydrated(records, MemoryStore({INDEX_KEY: "-4"}))
    assert state.index == 0

    state = _hydrated(records, MemoryStore({INDEX_KEY: "abc"}))
    assert state.index == 0


def test_no_writes_before_hydration(records):
    storage = MemoryStore({INDEX_KEY: "2", FILTER_KEY: "Dental"})
    state = DashboardState(storage=storage).start()

    state.attach(())
    state.set_industry("Food")

    assert state.lifecycle is Lifecycle.HYDRATING
    assert storage.data == {INDEX_KEY: "2", FILTER_KEY: "Dental"}


def test_empty_load_does_not_clobber_saved_position(records):
    storage = MemoryStore({INDEX_KEY: "3"})
    state = DashboardState(storage=storage).start()
    state.attach(())
    assert storage.get(INDEX_KEY) == "3"

    state.attach(records)
    assert state.index == 3
    assert storage.get(INDEX_KEY) == "3"


def test_hydrates_only_once(records, storage):
    storage.set(INDEX_KEY, "1")
    state = _hydrated(records, storage)
    storage.set(INDEX_KEY, "3")

    state.attach(records)

    assert state.index == 1


def test_reload_restores_navigated_index(records, storage, url_params):
    state = _hydrated(records, storage, url_params)
    state.go_next()
    state.go_next()

    reloaded = _hydrated(records, storage, url_params)

    assert reloaded.index == 2


def test_go_next_and_previous_stay_in_bounds(records, storage):
    state = _hydrated(records, storage)

    assert not state.can_go_previous
    assert state.go_previous() is False
    assert state.index == 0

    for _ in range(10):
        state.go_next()
    assert state.index == 3
    assert not state.can_go_next
    assert state.go_next() is False
    assert state.index == 3

    state.go_previous()
    assert state.index == 2
    assert storage.get(INDEX_KEY) == "2"


def test_jump_to_bounds(records, storage):
    state = _hydrated(records, storage)
    state.go_next()

    assert state.jump_to(0) is False
    assert state.index == 1
    assert state.jump_to(5) is False
    assert state.index == 1

    assert state.jump_to(1) is True
    assert state.index == 0

    assert state.jump_to("4") is True
    assert state.index == 3
    assert storage.get(INDEX_KEY) == "3"


def test_jump_to_rejects_non_numeric(records, storage):
    state = _hydrated(records, storage)
    state.jump_to(3)

    for bad in ("", "abc", "2.5", None, True):
        assert state.jump_to(bad) is False
    assert state.index == 2


def test_set_industry_resets_index_once(records, storage, url_params):
    state = _hydrated(records, storage, url_params)
    state.jump_to(3)

    assert state.set_industry("Dental") is True
    assert state.index == 0
    state.go_next()

    assert state.set_industry("Dental") is False
    assert state.index == 1
    assert [r.business_name for r in state.active] == ["Alpha Dental", "Delta Dental"]
    assert storage.get(FILTER_KEY) == "Dental"
    assert url_params.get(INDUSTRY_PARAM) == "Dental"


def test_clearing_industry_removes_url_param(records, storage, url_params):
    state = _hydrated(records, storage, url_params)
    state.set_industry("Food")
    assert url_params.get(INDUSTRY_PARAM) == "Food"

    state.set_industry(None)

    assert INDUSTRY_PARAM not in url_params.data
    assert storage.get(FILTER_KEY) == ""
    assert state.total == 4


def test_url_industry_overrides_stored_filter(records):
    storage = MemoryStore({INDEX_KEY: "1", FILTER_KEY: "Dental"})
    url_params = MemoryStore({INDUSTRY_PARAM: "Construction"})

    state = _hydrated(records, storage, url_params)

    assert state.industry == "Construction"
    assert state.index == 0
    assert storage.get(FILTER_KEY) == "Construction"


def test_url_industry_matching_stored_keeps_index(records):
    storage = MemoryStore({INDEX_KEY: "1", FILTER_KEY: "Dental"})
    url_params = MemoryStore({INDUSTRY_PARAM: "Dental"})

    state = _hydrated(records, storage, url_params)

    assert state.index == 1
    assert state.current.business_name == "Delta Dental"


def test_stored_filter_written_to_url_after_hydration(records):
    storage = MemoryStore({FILTER_KEY: "Food"})
    url_params = MemoryStore()

    _hydrated(records, storage, url_params)

    assert url_params.get(INDUSTRY_PARAM) == "Food"


def test_unknown_industry_is_dropped(records, storage, url_params):
    url_params.set(INDUSTRY_PARAM, "Aerospace")

    state = _hydrated(records, storage, url_params)

    assert state.industry is None
    assert state.total == 4
    assert INDUSTRY_PARAM not in url_params.data


def test_active_matches_filter(records, storage):
    state = _hydrated(records, storage)
    state.set_industry("Dental")

    assert state.active == filter_by_industry(records, "Dental")
    assert state.current.business_name == "Alpha Dental"


def test_storage_failures_are_ignored(records):
    state = _hydrated(records, BrokenStore(), BrokenStore())

    assert state.hydrated
    assert state.go_next() is True
    assert state.set_industry("Dental") is True
    assert state.index == 0


def test_without_stores(records):
    state = _hydrated(records)
    state.go_next()

    assert state.index == 1


def test_parse_index():
    assert parse_index(None) == 0
    assert parse_index(" 7 ") == 7
    assert parse_index("seven") == 0


def test_empty_reload_after_hydration_keeps_saved_index(records, storage):
    state = _hydrated(records, storage)
    state.jump_to(4)

    state.attach(())

    assert state.current is None
    assert storage.get(INDEX_KEY) == "3"

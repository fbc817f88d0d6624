"""
Array Operation Tests

push/pop/shift/unshift, element access, growth, bulk append, scoped views,
traversal and ownership transfer.
"""

import copy
import threading

import pytest

from dvec import (
    CellState,
    DVec,
    EmptyContainer,
    IndexOutOfRange,
    InvalidRange,
    MissingCapability,
    PeekView,
    PokeView,
    ReentrantAccess,
    UseAfterMove,
    from_elem,
    from_vec,
    unwrap,
)


# =============================================================================
# CONSTRUCTION
# =============================================================================

class TestConstruction:

    def test_empty(self):
        d = DVec()
        assert d.len() == 0
        assert d.is_empty()
        assert d.unwrap() == []

    def test_from_elem(self):
        assert from_elem("x").unwrap() == ["x"]

    def test_from_vec_adopts_list_without_copy(self):
        backing = [1, 2, 3]
        assert unwrap(from_vec(backing)) is backing

    def test_from_vec_accepts_any_iterable(self):
        assert from_vec(range(3)).unwrap() == [0, 1, 2]

    def test_repr_never_faults(self):
        d = from_vec([1])
        assert repr(d) == "DVec([1])"
        d.check_out(lambda v: None)
        assert repr(d) == "<DVec checked out>"


# =============================================================================
# SCENARIO
# =============================================================================

def test_push_pop_unshift_shift_reverse_scenario():
    d = from_vec([1, 2, 3])

    d.push(4)
    assert d.get() == [1, 2, 3, 4]

    assert d.pop() == 4
    assert d.get() == [1, 2, 3]

    d.unshift(0)
    assert d.get() == [0, 1, 2, 3]

    assert d.shift() == 0
    assert d.get() == [1, 2, 3]

    d.reverse()
    assert d.get() == [3, 2, 1]


# =============================================================================
# ENDS AND ELEMENTS
# =============================================================================

class TestEmpty:

    @pytest.mark.parametrize("op", ["pop", "shift", "last"])
    def test_empty_container_raises(self, op):
        d = DVec()
        with pytest.raises(EmptyContainer) as info:
            getattr(d, op)()
        assert info.value.code == "RE2033"
        assert op in str(info.value)


class TestElementAccess:

    def test_get_elt_out_of_range(self):
        d = from_vec([1, 2, 3])
        with pytest.raises(IndexOutOfRange) as info:
            d.get_elt(5)
        assert info.value.code == "RE2020"

    def test_negative_index_rejected(self):
        d = from_vec([1, 2, 3])
        with pytest.raises(IndexOutOfRange):
            d.get_elt(-1)

    def test_index_operator_matches_get_elt(self):
        d = from_vec(["a", "b"])
        assert d[1] == d.get_elt(1) == "b"
        with pytest.raises(IndexOutOfRange):
            d[2]

    def test_set_elt(self):
        d = from_vec([1, 2, 3])
        d.set_elt(1, 20)
        assert d.get() == [1, 20, 3]
        with pytest.raises(IndexOutOfRange):
            d.set_elt(3, 0)

    def test_last_returns_copy(self):
        d = from_vec([[1], [2]])
        tail = d.last()
        tail.append(99)
        assert d.get() == [[1], [2]]

    def test_get_elt_returns_copy(self):
        d = from_vec([{"k": 1}])
        elt = d.get_elt(0)
        elt["k"] = 2
        assert d.get_elt(0) == {"k": 1}

    def test_len_dunder(self):
        assert len(from_vec("abc")) == 3

    def test_not_iterable(self):
        with pytest.raises(TypeError):
            iter(from_vec([1]))


class TestGrowSetElt:

    def test_grows_and_fills(self):
        d = from_vec([1, 2])
        d.grow_set_elt(5, 0, 9)
        assert d.get() == [1, 2, 0, 0, 0, 9]

    def test_fill_values_are_independent_copies(self):
        d = DVec()
        d.grow_set_elt(2, [], ["x"])
        slots = d.unwrap()
        slots[0].append(1)
        assert slots == [[1], [], ["x"]]

    def test_in_range_behaves_like_set_elt(self):
        d = from_vec([1, 2, 3])
        d.grow_set_elt(1, 0, 7)
        assert d.get() == [1, 7, 3]

    def test_appends_at_length(self):
        d = from_vec([1])
        d.grow_set_elt(1, 0, 2)
        assert d.get() == [1, 2]

    def test_negative_index_rejected(self):
        with pytest.raises(IndexOutOfRange):
            from_vec([1]).grow_set_elt(-2, 0, 1)


# =============================================================================
# WHOLE CONTENTS
# =============================================================================

class TestWholeContents:

    def test_get_is_independent(self):
        d = from_vec([[1], [2]])
        snapshot = d.get()
        snapshot.append([3])
        snapshot[0].append(100)
        assert d.get() == [[1], [2]]

    def test_set_replaces(self):
        d = from_vec([1, 2, 3])
        replacement = [7]
        d.set(replacement)
        assert d.unwrap() is replacement

    def test_reserve_is_only_a_hint(self):
        d = from_vec([1, 2])
        d.reserve(100)
        assert d.capacity() == 100
        assert d.get() == [1, 2]
        d.reserve(10)
        assert d.capacity() == 100

    def test_capacity_tracks_length(self):
        d = from_vec(range(5))
        assert d.capacity() == 5


# =============================================================================
# BULK APPEND
# =============================================================================

class TestBulkAppend:

    def test_push_all(self):
        d = from_vec([1])
        d.push_all([2, 3])
        assert d.get() == [1, 2, 3]

    def test_push_slice_half_open(self):
        d = DVec()
        d.push_slice([0, 1, 2, 3, 4], 1, 3)
        assert d.get() == [1, 2]

    def test_push_slice_empty_range(self):
        d = from_vec([1])
        d.push_slice([5, 6], 2, 2)
        assert d.get() == [1]

    @pytest.mark.parametrize("start, stop", [(2, 1), (0, 4), (-1, 1)])
    def test_push_slice_bad_range(self, start, stop):
        d = from_vec([1])
        with pytest.raises(InvalidRange) as info:
            d.push_slice([1, 2, 3], start, stop)
        assert info.value.code == "RE2034"
        assert isinstance(info.value, IndexOutOfRange)
        assert d.state == CellState.PRESENT

    def test_push_all_copies_elements(self):
        source = [[1]]
        d = DVec()
        d.push_all(source)
        source[0].append(2)
        assert d.get() == [[1]]

    def test_push_all_reserves_combined_length(self):
        d = from_vec([1, 2])
        d.push_all([3, 4, 5])
        assert d.capacity() == 5

    def test_append_iter_moves_elements(self):
        item = object()
        d = DVec()
        d.append_iter(iter([item]))
        assert d.unwrap()[0] is item

    def test_append_iter_generator(self):
        d = from_vec([0])
        d.append_iter(x for x in range(1, 4))
        assert d.get() == [0, 1, 2, 3]


# =============================================================================
# SCOPED VIEWS
# =============================================================================

class TestBorrow:

    def test_borrow_returns_op_result(self):
        d = from_vec([1, 2, 3])
        assert d.borrow(sum) == 6
        assert d.state == CellState.PRESENT

    def test_borrow_view_is_read_only(self):
        d = from_vec([1])

        def write(view):
            view[0] = 2

        with pytest.raises(TypeError):
            d.borrow(write)

    def test_borrow_mut_writes_in_place(self):
        d = from_vec([3, 1, 2])

        def scramble(view):
            view.sort()
            view[0] = 10
            view.swap(1, 2)
            return len(view)

        assert d.borrow_mut(scramble) == 3
        assert d.get() == [10, 3, 2]

    def test_borrow_mut_cannot_resize(self):
        d = from_vec([1, 2])

        def grow(view):
            view[0:1] = [1, 1, 1]

        with pytest.raises(ValueError):
            d.borrow_mut(grow)
        assert d.is_poisoned

    def test_views_are_released(self):
        d = from_vec([1, 2])
        kept = d.borrow(lambda view: view)
        assert isinstance(kept, PeekView)
        assert repr(kept) == "<PeekView released>"
        with pytest.raises(UseAfterMove):
            kept[0]
        with pytest.raises(UseAfterMove):
            len(kept)

        kept_mut = d.borrow_mut(lambda view: view)
        assert isinstance(kept_mut, PokeView)
        with pytest.raises(UseAfterMove):
            kept_mut[0] = 5
        assert d.get() == [1, 2]

    def test_peek_view_sequence_helpers(self):
        d = from_vec(["a", "b", "a"])
        assert d.borrow(lambda view: (view.count("a"), view.index("b"), "b" in view, view[1:])) == (
            2, 1, True, ["b", "a"])


# =============================================================================
# TRAVERSAL
# =============================================================================

class TestTraversal:

    def test_rev_each_order(self):
        seen = []
        d = from_vec([1, 2, 3])
        d.rev_each(lambda e: seen.append(e) or True)
        assert seen == [3, 2, 1]
        assert d.get() == [1, 2, 3]

    def test_rev_eachi_indices(self):
        seen = []
        from_vec("abc").rev_eachi(lambda i, e: seen.append((i, e)) or True)
        assert seen == [(2, "c"), (1, "b"), (0, "a")]

    def test_rev_each_stops_early_and_restores(self):
        seen = []
        d = from_vec([1, 2, 3, 4])
        d.rev_each(lambda e: seen.append(e) or e > 3)
        assert seen == [4, 3]
        assert d.get() == [1, 2, 3, 4]

    def test_each_and_eachi_forward(self):
        seen = []
        d = from_vec([5, 6, 7])
        d.each(lambda e: seen.append(e) or e < 6)
        assert seen == [5, 6]
        indexed = []
        d.eachi(lambda i, e: indexed.append(i) or True)
        assert indexed == [0, 1, 2]

    def test_traversal_fault_poisons(self):
        d = from_vec([1, 2])

        def fail(e):
            raise RuntimeError("stop")

        with pytest.raises(RuntimeError):
            d.each(fail)
        assert d.is_poisoned


# =============================================================================
# OWNERSHIP
# =============================================================================

class TestOwnership:

    def test_unwrap_consumes(self):
        d = from_vec([1, 2])
        assert d.unwrap() == [1, 2]
        assert d.state == CellState.CONSUMED
        with pytest.raises(UseAfterMove) as info:
            d.len()
        assert info.value.code == "RE2032"
        with pytest.raises(UseAfterMove):
            d.unwrap()

    def test_transfer_invalidates_sender(self):
        d = from_vec([1, 2], copy_fn=None)
        d.reserve(8)
        moved = d.transfer()
        assert moved.capacity() == 8
        assert not moved.copyable
        with pytest.raises(UseAfterMove):
            d.push(3)
        moved.push(3)
        assert moved.unwrap() == [1, 2, 3]

    def test_transfer_to_worker_thread(self):
        d = from_vec([1, 2, 3])
        handoff = d.transfer()
        results = []

        def worker(owned):
            owned.push(4)
            results.append(owned.unwrap())

        t = threading.Thread(target=worker, args=(handoff,))
        t.start()
        t.join()
        assert results == [[1, 2, 3, 4]]
        with pytest.raises(UseAfterMove):
            d.get()

    def test_container_is_move_only(self):
        d = from_vec([1])
        with pytest.raises(TypeError):
            copy.copy(d)
        with pytest.raises(TypeError):
            copy.deepcopy(d)


# =============================================================================
# COPY CAPABILITY
# =============================================================================

class TestCopyCapability:

    @pytest.mark.parametrize("op", [
        lambda d: d.get(),
        lambda d: d.get_elt(0),
        lambda d: d[0],
        lambda d: d.last(),
        lambda d: d.push_all([1]),
        lambda d: d.push_slice([1], 0, 1),
        lambda d: d.grow_set_elt(3, None, 1),
    ])
    def test_copy_bound_ops_need_capability(self, op):
        d = from_vec([threading.Lock()], copy_fn=None)
        with pytest.raises(MissingCapability) as info:
            op(d)
        assert info.value.code == "RE2035"
        assert d.state == CellState.PRESENT

    @pytest.mark.parametrize("op", [
        lambda d: d.get(),
        lambda d: d.get_elt(0),
        lambda d: d.last(),
        lambda d: d.push_slice([1], 0, 5),
        lambda d: d.grow_set_elt(-1, None, 1),
    ])
    def test_checked_out_wins_over_capability_and_bounds(self, op):
        d = from_vec([threading.Lock()], copy_fn=None)
        taken = d.check_out(lambda v: v)
        with pytest.raises(ReentrantAccess) as info:
            op(d)
        assert info.value.code == "RE2030"
        d.give_back(taken)
        assert d.len() == 1

    def test_move_only_elements_support_other_ops(self):
        lock_a, lock_b = threading.Lock(), threading.Lock()
        d = DVec(copy_fn=None)
        d.push(lock_a)
        d.unshift(lock_b)
        d.reverse()
        assert d.borrow(lambda view: view[0] is lock_a)
        assert d.shift() is lock_a
        assert d.pop() is lock_b
        d.set([lock_a])
        assert d.unwrap() == [lock_a]

    def test_custom_copy_fn(self):
        calls = []

        def dup(x):
            calls.append(x)
            return x

        d = from_vec([1, 2], copy_fn=dup)
        d.get()
        assert calls == [1, 2]

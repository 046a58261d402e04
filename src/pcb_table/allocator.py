"""Slot allocator — occupancy tracking for the fixed-size process table.

The table has N slots numbered ``0..N-1``.  The allocator only knows
which of them are taken; it never touches the PCB records themselves.

Why lowest-index-first?
    A freed id is handed out again as soon as it is the smallest free
    one, so reuse is fully predictable: free ``{3, 5}``, create two
    processes, and they get 3 and then 5.  This makes listing output
    deterministic and easy to compare in tests.

Why a flag list instead of a free set?
    A set pops an arbitrary element.  Scanning a list of flags in order
    gives the lowest free index directly, and N is small (tens to a few
    hundred), so the O(N) scan is irrelevant.
"""


class SlotAllocator:
    """Track which of a fixed number of slots are occupied."""

    def __init__(self, *, capacity: int) -> None:
        """Create an allocator with every slot free.

        Args:
            capacity: Number of slots (must be at least 1).

        Raises:
            ValueError: If capacity is less than 1.

        """
        if capacity < 1:
            msg = f"Capacity must be positive, got {capacity}"
            raise ValueError(msg)
        self._occupied: list[bool] = [False] * capacity

    @property
    def capacity(self) -> int:
        """Return the total number of slots."""
        return len(self._occupied)

    @property
    def occupied_count(self) -> int:
        """Return the number of occupied slots."""
        return sum(self._occupied)

    @property
    def free_count(self) -> int:
        """Return the number of free slots."""
        return self.capacity - self.occupied_count

    def in_range(self, index: int) -> bool:
        """Return True if *index* names a slot in ``[0, capacity)``."""
        return 0 <= index < len(self._occupied)

    def is_occupied(self, index: int) -> bool:
        """Return True if *index* is in range and occupied."""
        return self.in_range(index) and self._occupied[index]

    def find_free_index(self) -> int | None:
        """Return the lowest free slot, or None if every slot is taken.

        This is a pure query; call ``occupy()`` to claim the slot.
        """
        for index, taken in enumerate(self._occupied):
            if not taken:
                return index
        return None

    def occupy(self, index: int) -> None:
        """Mark a free slot as occupied.

        Raises:
            ValueError: If the slot is out of range or already occupied.

        """
        if not self.in_range(index):
            msg = f"Slot {index} is out of range"
            raise ValueError(msg)
        if self._occupied[index]:
            msg = f"Slot {index} is already occupied"
            raise ValueError(msg)
        self._occupied[index] = True

    def release(self, index: int) -> None:
        """Return a slot to the free pool.  Releasing a free slot is a no-op."""
        if self.in_range(index):
            self._occupied[index] = False

    def release_all(self) -> None:
        """Free every slot."""
        self._occupied = [False] * len(self._occupied)

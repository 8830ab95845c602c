#!/usr/bin/env python3
"""
Virtual Memory Simulator
Implements FIFO, LRU and Optimal page replacement over a fixed set of frames
"""

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple, Type

MAX_FRAMES = 100
MAX_REFERENCES = 10000
MAX_PAGE_RANGE = 100


class SimulationError(Exception):
    """Base class for every error raised by the simulator"""


class InvalidFrameCount(SimulationError, ValueError):
    """Frame count outside [1, MAX_FRAMES]"""


class InvalidRange(SimulationError, ValueError):
    """Page range outside [1, MAX_PAGE_RANGE]"""


class InvalidLength(SimulationError, ValueError):
    """Negative length requested from the generator"""


class InvalidReference(SimulationError, ValueError):
    """A reference that is not a non-negative page number"""


class SequenceTooLong(SimulationError, ValueError):
    """More references than the simulator accepts"""


class EmptySequence(SimulationError, ValueError):
    """No references, so the miss rate is undefined"""


class UnknownPolicy(SimulationError, ValueError):
    """Replacement algorithm name that is not registered"""


class UnreadableInput(SimulationError, OSError):
    """Reference file cannot be opened or read"""


class UnwritableOutput(SimulationError, OSError):
    """Output file cannot be created"""


def check_frame_count(num_frames: int) -> int:
    if num_frames < 1 or num_frames > MAX_FRAMES:
        raise InvalidFrameCount(
            f"Number of frames must be between 1 and {MAX_FRAMES}, got {num_frames}")
    return num_frames


class FrameTable:
    """Physical memory: a fixed number of slots, each empty (None) or holding a page"""

    def __init__(self, num_frames: int):
        self.slots: List[Optional[int]] = [None] * num_frames

    def __len__(self) -> int:
        return len(self.slots)

    def find(self, page_num: int) -> Optional[int]:
        """Return the slot holding page_num, or None if it is not resident"""
        for i, frame_page in enumerate(self.slots):
            if frame_page == page_num:
                return i
        return None

    def contains(self, page_num: int) -> bool:
        return self.find(page_num) is not None

    def insert_or_replace(self, page_num: int, slot: int) -> Optional[int]:
        """Place page_num in slot, returning whatever was there before"""
        previous = self.slots[slot]
        self.slots[slot] = page_num
        return previous

    def snapshot(self) -> Tuple[Optional[int], ...]:
        return tuple(self.slots)

    def __repr__(self):
        return f"FrameTable({self.slots})"


class FrameEvent(NamedTuple):
    """Outcome of one reference: hit or miss, the slot involved and the page it evicted"""
    hit: bool
    slot: int
    evicted_page: Optional[int] = None


class PageReplacementAlgorithm:
    """Base class for page replacement algorithms"""

    name = ""

    def __init__(self, num_frames: int):
        self.num_frames = num_frames
        self.frames = FrameTable(num_frames)
        self.misses = 0
        self.page_faults = 0

    def access_page(self, page_num: int, step: int) -> FrameEvent:
        """
        Reference page_num at position step of the reference string.
        The first num_frames misses fill empty memory and are not counted
        as page faults.
        """
        slot = self.frames.find(page_num)
        if slot is not None:
            self._on_hit(slot, step)
            return FrameEvent(True, slot)

        slot = self._select_victim(step)
        evicted_page = self.frames.insert_or_replace(page_num, slot)
        self._on_load(slot, step)

        self.misses += 1
        if self.misses > self.num_frames:
            self.page_faults += 1
        return FrameEvent(False, slot, evicted_page)

    def _select_victim(self, step: int) -> int:
        """Pick the slot that receives the missing page"""
        raise NotImplementedError

    def _on_hit(self, slot: int, step: int):
        pass

    def _on_load(self, slot: int, step: int):
        pass


class FIFOPageReplacement(PageReplacementAlgorithm):
    """First-In-First-Out page replacement"""

    name = "fifo"

    def __init__(self, num_frames: int):
        super().__init__(num_frames)
        self.next_slot = 0

    def _select_victim(self, step: int) -> int:
        # Slots are filled and then replaced in strict rotation
        slot = self.next_slot
        self.next_slot = (self.next_slot + 1) % self.num_frames
        return slot


class LRUPageReplacement(PageReplacementAlgorithm):
    """Least Recently Used page replacement"""

    name = "lru"

    def __init__(self, num_frames: int):
        super().__init__(num_frames)
        self.last_used = [0] * num_frames
        self.clock = 0

    def _touch(self, slot: int):
        # Clock values start at 1, so a slot never used keeps the lowest stamp
        self.clock += 1
        self.last_used[slot] = self.clock

    def _on_hit(self, slot: int, step: int):
        self._touch(slot)

    def _on_load(self, slot: int, step: int):
        self._touch(slot)

    def _select_victim(self, step: int) -> int:
        victim = 0
        for i in range(1, self.num_frames):
            if self.last_used[i] < self.last_used[victim]:
                victim = i
        return victim


class OptimalPageReplacement(PageReplacementAlgorithm):
    """Optimal page replacement (requires future knowledge)"""

    name = "opt"

    def __init__(self, num_frames: int, reference_string: Sequence[int]):
        super().__init__(num_frames)
        self.reference_string = reference_string

    def next_use(self, page_num: Optional[int], step: int) -> int:
        """Index of the next reference to page_num after step, or len(reference_string) if none"""
        if page_num is not None:
            for j in range(step + 1, len(self.reference_string)):
                if self.reference_string[j] == page_num:
                    return j
        return len(self.reference_string)

    def _select_victim(self, step: int) -> int:
        # Evict the page used farthest in the future; first slot wins a tie
        farthest_use = -1
        victim = 0
        for i, frame_page in enumerate(self.frames.slots):
            next_use = self.next_use(frame_page, step)
            if next_use > farthest_use:
                farthest_use = next_use
                victim = i
        return victim


ALGORITHMS: Dict[str, Type[PageReplacementAlgorithm]] = {
    FIFOPageReplacement.name: FIFOPageReplacement,
    LRUPageReplacement.name: LRUPageReplacement,
    OptimalPageReplacement.name: OptimalPageReplacement,
}


def make_algorithm(name: str, num_frames: int,
                   reference_string: Sequence[int]) -> PageReplacementAlgorithm:
    """Build a fresh algorithm instance by name (fifo, lru or opt)"""
    algorithm_class = ALGORITHMS.get(name.lower())
    if algorithm_class is None:
        raise UnknownPolicy(
            f"Unknown algorithm '{name}', expected one of: {', '.join(ALGORITHMS)}")
    if algorithm_class is OptimalPageReplacement:
        return OptimalPageReplacement(num_frames, reference_string)
    return algorithm_class(num_frames)


class StepRecord(NamedTuple):
    """Frame contents right after one reference was processed"""
    step: int
    page: int
    frames: Tuple[Optional[int], ...]
    hit: bool
    evicted_page: Optional[int]
    counted: bool


def format_step(record: StepRecord) -> str:
    """Render a step as '<page>: [ 1| 2| | ] F', marking every miss with F"""
    cells = []
    for frame_page in record.frames:
        if frame_page is None:
            cells.append(" | ")
        else:
            cells.append(f"{frame_page:2d}|")
    marker = " " if record.hit else "F"
    return f"{record.page}: [{''.join(cells)}] {marker}"


class SimulationResult:
    """Outcome of running one reference string through one algorithm"""

    def __init__(self, algorithm: str, num_frames: int, total_references: int,
                 misses: int, page_faults: int,
                 final_frames: Tuple[Optional[int], ...],
                 steps: Optional[List[StepRecord]] = None):
        self.algorithm = algorithm
        self.num_frames = num_frames
        self.total_references = total_references
        self.misses = misses
        self.page_faults = page_faults
        self.final_frames = final_frames
        self.steps = steps or []
        self.miss_rate = 100.0 * page_faults / total_references

    def summary(self) -> str:
        return (f"Miss rate = {self.page_faults} / {self.total_references} "
                f"= {self.miss_rate:.2f}%")

    def __repr__(self):
        return (f"SimulationResult(algorithm={self.algorithm!r}, frames={self.num_frames}, "
                f"faults={self.page_faults}/{self.total_references}, "
                f"miss_rate={self.miss_rate:.2f})")


class VirtualMemorySimulator:
    """Main virtual memory simulator"""

    def __init__(self, num_frames: int = 3, max_references: int = MAX_REFERENCES):
        self.num_frames = check_frame_count(num_frames)
        self.max_references = max_references

    def _check_reference_string(self, reference_string: Sequence[int]):
        if len(reference_string) == 0:
            raise EmptySequence("Reference string is empty, miss rate is undefined")
        if len(reference_string) > self.max_references:
            raise SequenceTooLong(
                f"Maximum number of page references ({self.max_references}) exceeded: "
                f"got {len(reference_string)}")
        for page_num in reference_string:
            if page_num < 0:
                raise InvalidReference(f"Page numbers must be non-negative, got {page_num}")

    def run(self, reference_string: Sequence[int], algorithm: str,
            trace: bool = False) -> SimulationResult:
        """Simulate a complete reference string with the named algorithm"""
        reference_string = tuple(reference_string)
        pager = make_algorithm(algorithm, self.num_frames, reference_string)
        self._check_reference_string(reference_string)

        steps = []
        for step, page_num in enumerate(reference_string):
            faults_before = pager.page_faults
            event = pager.access_page(page_num, step)
            if trace:
                steps.append(StepRecord(
                    step=step,
                    page=page_num,
                    frames=pager.frames.snapshot(),
                    hit=event.hit,
                    evicted_page=event.evicted_page,
                    counted=pager.page_faults > faults_before,
                ))

        return SimulationResult(
            algorithm=pager.name,
            num_frames=self.num_frames,
            total_references=len(reference_string),
            misses=pager.misses,
            page_faults=pager.page_faults,
            final_frames=pager.frames.snapshot(),
            steps=steps,
        )


def simulate(reference_string: Sequence[int], num_frames: int, algorithm: str,
             trace: bool = False, max_references: int = MAX_REFERENCES) -> SimulationResult:
    """Run a single (reference string, frame count, algorithm) simulation"""
    simulator = VirtualMemorySimulator(num_frames, max_references=max_references)
    return simulator.run(reference_string, algorithm, trace=trace)

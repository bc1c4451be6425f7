"""
Match dependency tracking.

DependencyGraph keeps one MatchTask per match (the arena) with the set of
dependencies still unsatisfied, plus the reverse edges used to notify
dependents when a match completes. ReadyQueue holds the tasks that can be
placed, in scheduling priority order.
"""

from collections import defaultdict
from typing import Dict, Iterable, Iterator, List, Optional, Set

from tournament_scheduler.models import Identity, Match, MatchTask, TaskState, identity_key


class ReadyQueue:
    """
    Priority list of READY tasks.
    Ordered by round (lower first), then by match id (lexicographic).
    """

    def __init__(self):
        self._tasks: List[MatchTask] = []

    def enqueue(self, task: MatchTask):
        task.state = TaskState.READY
        self._tasks.append(task)
        self._tasks.sort(key=lambda t: t.priority)

    def remove(self, match_id: Identity) -> bool:
        for index, task in enumerate(self._tasks):
            if task.match_id == match_id:
                del self._tasks[index]
                return True
        return False

    def peek(self) -> Optional[MatchTask]:
        return self._tasks[0] if self._tasks else None

    def is_empty(self) -> bool:
        return not self._tasks

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[MatchTask]:
        return iter(list(self._tasks))

    def __bool__(self) -> bool:
        return bool(self._tasks)


class DependencyGraph:
    """
    Dependency state for one scheduling call.

    Args:
        matches: Matches to place
        satisfied: Match ids that already count as completed (live reschedule)
    """

    def __init__(self, matches: Iterable[Match], satisfied: Iterable[Identity] = ()):
        self.satisfied: Set[Identity] = set(satisfied)
        self.tasks: Dict[Identity, MatchTask] = {}
        self.dependents: Dict[Identity, List[Identity]] = defaultdict(list)

        for match in matches:
            deps = list(match.dependencies or [])
            remaining = {dep for dep in deps if dep not in self.satisfied}
            self.tasks[match.id] = MatchTask(match=match, remaining_dependencies=remaining)

            for dep in deps:
                if match.id not in self.dependents[dep]:
                    self.dependents[dep].append(match.id)

    def __len__(self) -> int:
        return len(self.tasks)

    def initial_ready(self) -> List[MatchTask]:
        """Tasks with no unmet dependency, in input order."""
        return [task for task in self.tasks.values() if not task.remaining_dependencies]

    def mark_completed(self, match_id: Identity) -> List[MatchTask]:
        """Notify dependents that `match_id` finished; returns the tasks that just became ready."""
        unlocked = []
        for dependent_id in self.dependents.get(match_id, []):
            task = self.tasks.get(dependent_id)
            if task is None or task.state != TaskState.PENDING:
                continue
            if match_id in task.remaining_dependencies:
                task.remaining_dependencies.discard(match_id)
                if not task.remaining_dependencies:
                    unlocked.append(task)
        return unlocked

    def mark_placed(self, match_id: Identity):
        self.tasks[match_id].state = TaskState.PLACED

    def placed_count(self) -> int:
        return sum(1 for task in self.tasks.values() if task.state == TaskState.PLACED)

    def unplaced(self) -> List[MatchTask]:
        return [task for task in self.tasks.values() if task.state != TaskState.PLACED]

    def dangling_references(self) -> Dict[Identity, List[Identity]]:
        """Dependencies that name no known match, keyed by the match declaring them."""
        dangling = {}
        for task in self.tasks.values():
            missing = [
                dep for dep in task.match.dependencies or []
                if dep not in self.tasks and dep not in self.satisfied
            ]
            if missing:
                dangling[task.match_id] = missing
        return dangling

    def find_cycle(self) -> Optional[List[Identity]]:
        """Return one dependency cycle among the unplaced tasks, or None."""
        order = [task.match_id for task in self.unplaced()]
        candidates = set(order)
        done: Set[Identity] = set()

        def edges(match_id: Identity) -> Iterator[Identity]:
            deps = self.tasks[match_id].remaining_dependencies
            return iter(sorted((dep for dep in deps if dep in candidates), key=identity_key))

        # Iterative DFS; bracket chains can be deeper than the recursion limit
        for root in order:
            if root in done:
                continue
            path: List[Identity] = [root]
            visiting: Set[Identity] = {root}
            stack = [edges(root)]

            while stack:
                dep = next(stack[-1], None)
                if dep is None:
                    stack.pop()
                    finished = path.pop()
                    visiting.discard(finished)
                    done.add(finished)
                    continue
                if dep in done:
                    continue
                if dep in visiting:
                    return path[path.index(dep):] + [dep]
                visiting.add(dep)
                path.append(dep)
                stack.append(edges(dep))
        return None

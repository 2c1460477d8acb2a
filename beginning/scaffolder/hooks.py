"""Post-generation hooks.

A fixed, ordered list of external commands runs against a freshly generated
project.  Each hook is gated by a trigger path inside the project: when the
trigger is missing the hook is skipped silently.  The first failing hook
aborts the rest of the sequence; generated files and the effects of hooks that
already ran are left alone.

Hooks run with the process working directory switched to the project root
and the previous directory restored afterwards, whatever the outcome.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from rich.markup import escape

from ..errors import HookExecutionError, ScaffoldIOError
from ..utils import console, run_command, working_directory


@dataclass(frozen=True)
class HookSpec:
    """A post-generation command and the file that enables it.

    ``trigger`` is relative to the generated project root.
    """

    name: str
    trigger: str
    command: str


DEFAULT_HOOKS: tuple[HookSpec, ...] = (
    HookSpec(
        name="chmod-scripts",
        trigger="bin",
        command="find bin -maxdepth 1 -type f -name '*.sh' -exec chmod +x {} +",
    ),
    HookSpec(name="swagger", trigger="bin/swagger.sh", command="./bin/swagger.sh"),
    HookSpec(name="go-mod-tidy", trigger="go.mod", command="go mod tidy"),
    HookSpec(name="wire", trigger="bin/wire.sh", command="./bin/wire.sh"),
)


class HookRunner:
    """Runs :class:`HookSpec` commands in declared order.

    Args:
        hooks: The hook sequence.  Defaults to :data:`DEFAULT_HOOKS`.
        timeout: Per-hook timeout in seconds.  ``None`` waits indefinitely,
            so a hung command blocks the run.
    """

    def __init__(
        self,
        hooks: Sequence[HookSpec] = DEFAULT_HOOKS,
        timeout: float | None = None,
    ) -> None:
        self.hooks = tuple(hooks)
        self.timeout = timeout

    async def run(self, project_root: str | Path) -> list[HookSpec]:
        """Run every hook whose trigger exists under *project_root*.

        Returns:
            The hooks that actually executed, in order.

        Raises:
            ScaffoldIOError: If *project_root* is not a directory.
            HookExecutionError: On the first hook that cannot be spawned or
                exits non-zero; later hooks are not run.
        """
        root = Path(project_root).absolute()
        if not root.is_dir():
            raise ScaffoldIOError(root, "project root does not exist")

        executed: list[HookSpec] = []
        with working_directory(root):
            for hook in self.hooks:
                if not (root / hook.trigger).exists():
                    console.print(
                        f"[dim]Skipping hook {escape(hook.name)}: {escape(hook.trigger)} not found[/dim]"
                    )
                    continue
                await self._run_one(hook, root)
                executed.append(hook)
        return executed

    async def _run_one(self, hook: HookSpec, root: Path) -> None:
        console.print(f"[cyan]Running:[/cyan] {escape(hook.command)}")
        try:
            returncode, _, stderr = await run_command(
                hook.command, cwd=root, timeout=self.timeout, capture=False
            )
        except OSError as exc:
            raise HookExecutionError(hook.name, hook.command, detail=str(exc)) from exc

        if returncode != 0:
            raise HookExecutionError(hook.name, hook.command, returncode, detail=stderr)


async def run_hooks(
    project_root: str | Path,
    hooks: Sequence[HookSpec] = DEFAULT_HOOKS,
    timeout: float | None = None,
) -> list[HookSpec]:
    """Convenience wrapper around :meth:`HookRunner.run`."""
    return await HookRunner(hooks, timeout).run(project_root)

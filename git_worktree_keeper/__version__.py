"""Version information for git-worktree-keeper."""

try:
    from git_worktree_keeper._version import __version__
except ImportError:
    # Running from a source checkout without a build step
    __version__ = "0.0.0+unknown"

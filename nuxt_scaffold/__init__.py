"""Additive scaffolder for Nuxt 4 projects.

Classifies every file of a template tree (embedded, local directory, or a Git
repository) as add / skip / exclude against a target project, then copies the
"add" set without ever overwriting an existing file.

Quick usage::

    from nuxt_scaffold.config import ScaffoldConfig
    from nuxt_scaffold.pipeline import ScaffoldPipeline

    config = ScaffoldConfig(target="./my-nuxt-app", dry_run=True)
    exit_code = ScaffoldPipeline(config).run()
"""

__version__ = "1.0.0"

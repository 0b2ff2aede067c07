import tempfile
from types import SimpleNamespace
from unittest import mock

from django.test import TestCase

import jobfeeds.celery as celery_mod
from jobfeeds.celery import import_all_submodules


class ImportAllSubmodulesTests(TestCase):
    def test_returns_early_for_non_package(self):
        mock_pkg = SimpleNamespace(__name__="not_a_pkg")

        with (
            mock.patch.object(
                celery_mod.importlib, "import_module", return_value=mock_pkg
            ) as mock_import,
            mock.patch.object(celery_mod.pkgutil, "walk_packages") as mock_walk,
        ):
            import_all_submodules("not_a_pkg")

        mock_import.assert_called_once_with("not_a_pkg")
        mock_walk.assert_not_called()

    def test_imports_all_submodules_for_package(self):
        sub = SimpleNamespace(name="dummy_pkg.feeds")

        with tempfile.TemporaryDirectory() as td:
            mock_pkg = SimpleNamespace(__name__="dummy_pkg", __path__=[td])

            with (
                mock.patch.object(celery_mod.importlib, "import_module") as mock_import,
                mock.patch.object(
                    celery_mod.pkgutil, "walk_packages", return_value=[sub]
                ) as mock_walk,
            ):
                mock_import.side_effect = lambda name: (
                    mock_pkg if name == "dummy_pkg" else SimpleNamespace(__name__=name)
                )
                import_all_submodules("dummy_pkg")

        mock_walk.assert_called_once_with(mock_pkg.__path__, "dummy_pkg.")
        self.assertIn(mock.call("dummy_pkg.feeds"), mock_import.mock_calls)

    def test_import_task_is_registered(self):
        self.assertIn("importer.tasks.feeds.import_feed_task", celery_mod.app.tasks)
        self.assertIn(
            "importer.tasks.feeds.enqueue_all_feeds_task", celery_mod.app.tasks
        )

"""Tests for the netstat listing source."""

import subprocess
from unittest.mock import MagicMock, patch

import pytest

from portlens.core.listing import (
    default_schema,
    listing_source_for,
    netstat_listing,
    resolve_schema,
)
from portlens.errors import ListingError
from portlens.models.enums import ListingSchema


class TestResolveSchema:
    def test_explicit(self):
        assert resolve_schema("windows") is ListingSchema.WINDOWS
        assert resolve_schema("POSIX") is ListingSchema.POSIX
        assert resolve_schema(ListingSchema.POSIX) is ListingSchema.POSIX

    def test_auto(self):
        assert resolve_schema("auto") is default_schema()
        assert resolve_schema(None) is default_schema()

    def test_unknown(self):
        with pytest.raises(ValueError):
            resolve_schema("plan9")


class TestNetstatListing:
    @patch("portlens.core.listing.subprocess.run")
    def test_windows_args(self, mock_run):
        mock_run.return_value = MagicMock(stdout="TCP ...", stderr="")
        assert netstat_listing(ListingSchema.WINDOWS) == "TCP ..."
        assert mock_run.call_args.args[0] == ["netstat", "-ano"]

    @patch("portlens.core.listing.subprocess.run")
    def test_posix_args(self, mock_run):
        mock_run.return_value = MagicMock(stdout="tcp ...", stderr="(Not all processes could be identified)")
        assert netstat_listing(ListingSchema.POSIX) == "tcp ..."
        assert mock_run.call_args.args[0] == ["netstat", "-tlnp"]

    @patch("portlens.core.listing.subprocess.run")
    def test_missing_binary(self, mock_run):
        mock_run.side_effect = FileNotFoundError("netstat")
        with pytest.raises(ListingError, match="not found"):
            netstat_listing(ListingSchema.POSIX)

    @patch("portlens.core.listing.subprocess.run")
    def test_nonzero_exit(self, mock_run):
        mock_run.side_effect = subprocess.CalledProcessError(2, ["netstat"], stderr="bad flag")
        with pytest.raises(ListingError, match="status 2"):
            netstat_listing(ListingSchema.POSIX)

    @patch("portlens.core.listing.subprocess.run")
    def test_permission_error(self, mock_run):
        mock_run.side_effect = PermissionError("denied")
        with pytest.raises(ListingError):
            netstat_listing(ListingSchema.WINDOWS)

    @patch("portlens.core.listing.netstat_listing")
    def test_source_binds_schema(self, mock_listing):
        mock_listing.return_value = "text"
        source = listing_source_for(ListingSchema.WINDOWS)
        assert source() == "text"
        mock_listing.assert_called_once_with(ListingSchema.WINDOWS)

"""Discover and run Perl Test2 subtests and Test::Class methods."""

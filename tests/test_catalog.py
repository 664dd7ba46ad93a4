# tests/test_catalog.py
"""Test songs, albums, comments and views"""

import threading
from datetime import date

import pytest

from genius_catalog.core.exceptions import ValidationError
from genius_catalog.models import Account, Genre


class TestSongs:
    """Test song creation, lyrics and search"""

    def test_create_song_is_owned_by_artist(self, catalog, store, artist, song):
        """Test a created song appears in the artist's songs"""
        assert song.artists == ["taylor_swift"]
        assert store.get_song(song.song_id) is song
        assert catalog.get_all_artist_songs(artist) == [song]

    def test_create_song_requires_artist(self, catalog, user):
        """Test songs cannot be created without an artist account"""
        with pytest.raises(ValidationError):
            catalog.create_song("Song", "", None, Genre.POP, date(2020, 1, 1))
        with pytest.raises(ValidationError):
            catalog.create_song("Song", "", user, Genre.POP, date(2020, 1, 1))

    def test_create_song_requires_title_and_genre(self, catalog, artist):
        """Test missing required song data raises"""
        with pytest.raises(ValidationError):
            catalog.create_song("", "", artist, Genre.POP, date(2020, 1, 1))
        with pytest.raises(ValidationError):
            catalog.create_song("Song", "", artist, None, date(2020, 1, 1))

    def test_update_lyrics_owner_only(self, catalog, song, other_artist, user):
        """Test only an owning artist edits lyrics directly"""
        assert not catalog.update_lyrics(other_artist, song, "hijacked")
        assert not catalog.update_lyrics(user, song, "hijacked")
        assert song.lyrics == "Magic, madness, heaven, sin"

    def test_update_lyrics(self, catalog, song, artist):
        """Test the owner can replace lyrics"""
        assert catalog.update_lyrics(artist, song, "Magic, madness, heaven sent")
        assert song.lyrics == "Magic, madness, heaven sent"

    def test_search_songs(self, catalog, artist, other_artist, song):
        """Test search matches title, username and display name"""
        starboy = catalog.create_song("Starboy", "", other_artist, Genre.RNB, date(2016, 9, 22))

        assert catalog.search_songs("blank") == [song]
        assert catalog.search_songs("WEEKND") == [starboy]
        assert catalog.search_songs("The Weeknd") == [starboy]
        assert catalog.search_songs("") == [song, starboy]
        assert catalog.search_songs("nothing like this") == []

    def test_top_songs(self, catalog, artist, song):
        """Test songs are ranked by views"""
        hit = catalog.create_song("Love Story", "", artist, Genre.COUNTRY_POP, date(2008, 9, 12))
        hit.set_views(100)
        song.set_views(10)

        assert catalog.get_top_songs(1) == [hit]
        assert catalog.get_top_songs(10) == [hit, song]
        assert catalog.get_top_songs(-1) == []

    def test_add_view(self, catalog, song):
        """Test each view adds one"""
        assert catalog.add_view_to_song(song)
        assert catalog.add_view_to_song(song)
        assert song.views == 2
        assert not catalog.add_view_to_song(None)

    def test_concurrent_views(self, catalog, song):
        """Test views from many threads are all counted"""
        def view():
            for _ in range(100):
                catalog.add_view_to_song(song)

        threads = [threading.Thread(target=view) for _ in range(10)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert song.views == 1000


class TestAlbums:
    """Test albums and tracklists"""

    def test_create_album_needs_verified_artist(self, catalog, store, password_hash):
        """Test unverified artists cannot create albums"""
        pending = Account.new_artist("newband", password_hash, "New Band", 24, "band@example.com")
        store.add_account(pending)
        assert catalog.create_album("Demo", pending, date(2024, 1, 1)) is None
        assert store.get_albums() == []

    def test_create_album_blank_title(self, catalog, artist):
        """Test blank titles are refused"""
        assert catalog.create_album("  ", artist, date(2024, 1, 1)) is None

    def test_album_tracklist(self, catalog, artist, song):
        """Test songs are added and removed in order"""
        album = catalog.create_album("1989", artist, date(2014, 10, 27))
        love_story = catalog.create_song("Love Story", "", artist, Genre.COUNTRY_POP, date(2008, 9, 12))

        assert catalog.add_song_to_album(album, song)
        assert catalog.add_song_to_album(album, love_story)
        assert album.tracklist == [song.song_id, love_story.song_id]
        assert not catalog.add_song_to_album(album, song)

        assert catalog.remove_song_from_album(album, song)
        assert album.tracklist == [love_story.song_id]
        assert not catalog.remove_song_from_album(album, song)

    def test_cannot_add_other_artists_song(self, catalog, artist, other_artist):
        """Test an album only holds its artist's songs"""
        album = catalog.create_album("1989", artist, date(2014, 10, 27))
        starboy = catalog.create_song("Starboy", "", other_artist, Genre.RNB, date(2016, 9, 22))
        assert not catalog.add_song_to_album(album, starboy)
        assert album.tracklist == []

    def test_all_artist_songs_album_tracks_first(self, catalog, artist, song):
        """Test album tracks come first, then songs on no album"""
        single = catalog.create_song("Single", "", artist, Genre.POP, date(2020, 1, 1))
        album = catalog.create_album("1989", artist, date(2014, 10, 27))
        later = catalog.create_song("Style", "", artist, Genre.POP, date(2014, 10, 27))
        catalog.add_song_to_album(album, later)
        catalog.add_song_to_album(album, song)

        assert catalog.get_all_artist_songs(artist) == [later, song, single]

    def test_search_albums(self, catalog, artist, other_artist):
        """Test album search by title and artist"""
        mine = catalog.create_album("1989", artist, date(2014, 10, 27))
        theirs = catalog.create_album("After Hours", other_artist, date(2020, 3, 20))

        assert catalog.search_albums("after") == [theirs]
        assert catalog.search_albums(None) == [mine, theirs]
        assert catalog.search_albums("", artist) == [mine]
        assert catalog.get_albums_by_artist(other_artist) == [theirs]


class TestComments:
    """Test comments and reactions"""

    def test_add_comment(self, catalog, user, song):
        """Test a user comment is listed on the song"""
        comment = catalog.add_comment(user, song, "  Love it  ")

        assert comment is not None
        assert comment.author == "john_doe"
        assert comment.text == "Love it"
        assert catalog.get_song_comments(song) == [comment]

    def test_only_users_comment(self, catalog, artist, admin, song):
        """Test artists and admins cannot comment"""
        assert catalog.add_comment(artist, song, "my own song") is None
        assert catalog.add_comment(admin, song, "hello") is None
        assert catalog.get_song_comments(song) == []

    def test_blank_comment_refused(self, catalog, user, song):
        """Test empty comments are refused"""
        assert catalog.add_comment(user, song, "   ") is None
        assert song.comments == []

    def test_reactions(self, catalog, user, song):
        """Test likes and dislikes never go below zero"""
        comment = catalog.add_comment(user, song, "Love it")

        assert catalog.like_comment(comment)
        assert catalog.like_comment(comment)
        assert catalog.dislike_comment(comment)
        assert (comment.likes, comment.dislikes) == (2, 1)

        catalog.remove_like(comment)
        catalog.remove_dislike(comment)
        catalog.remove_dislike(comment)
        assert (comment.likes, comment.dislikes) == (1, 0)

    def test_reaction_on_unknown_comment(self, catalog):
        """Test reacting to nothing fails"""
        assert not catalog.like_comment(None)

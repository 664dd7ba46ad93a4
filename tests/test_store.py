# tests/test_store.py
"""Test the in-memory catalog store"""

import threading
from datetime import date

from genius_catalog.models import LYRICS_LOADING, Account, Album, Comment, Genre, LyricEdit, Song
from genius_catalog.storage import CatalogStore


def _song(title="Song", artists=("taylor_swift",), **kwargs):
    return Song(title, "lyrics", list(artists), Genre.POP, date(2020, 1, 1), **kwargs)


class TestAccounts:
    """Test the account directory"""

    def test_usernames_unique_case_insensitive(self, store):
        """Test a second account with the same folded username is ignored"""
        first = Account.new_user("Alice", "h", "Alice", 20, "a@example.com")
        store.add_account(first)
        store.add_account(Account.new_user("ALICE", "h", "Other", 30, "b@example.com"))

        assert len(store.get_accounts()) == 1
        assert store.get_account_by_username("alice") is first
        assert store.get_account_by_username(" aLiCe ") is first

    def test_unknown_and_none_lookups(self, store):
        """Test lookups of missing accounts return None"""
        assert store.get_account_by_username("nobody") is None
        assert store.get_account_by_username(None) is None
        store.add_account(None)
        assert store.get_accounts() == []

    def test_following_has_no_duplicates(self, store, user, artist):
        """Test following the same artist twice is refused"""
        assert store.add_following(user, artist)
        assert not store.add_following(user, artist)
        assert user.profile.following == ["taylor_swift"]

        assert store.remove_following(user, artist)
        assert not store.remove_following(user, artist)
        assert user.profile.following == []

    def test_only_users_follow(self, store, artist, other_artist):
        """Test artists have no following list"""
        assert not store.add_following(artist, other_artist)


class TestSongs:
    """Test songs and derived views"""

    def test_songs_by_artist_is_derived(self, store):
        """Test an artist's songs come from the songs' artist lists"""
        a = _song("A")
        b = _song("B", artists=("the_weeknd",))
        c = _song("C", artists=("the_weeknd", "taylor_swift"))
        for s in (a, b, c):
            store.add_song(s)

        assert store.songs_by_artist("taylor_swift") == [a, c]
        assert store.songs_by_artist("The_Weeknd") == [b, c]
        assert store.songs_by_artist(None) == []

    def test_external_id_index(self, store):
        """Test songs can be found by their Genius id"""
        song = _song(external_id=378195)
        store.add_song(song)
        assert store.get_song_by_external_id(378195) is song
        assert store.get_song_by_external_id(1) is None
        assert store.get_song_by_external_id(None) is None

    def test_replace_placeholder_only_while_loading(self, store):
        """Test placeholder replacement never overwrites real lyrics"""
        song = _song()
        song.lyrics = LYRICS_LOADING
        store.add_song(song)

        assert store.replace_placeholder_lyrics(song.song_id, "real lyrics")
        assert song.lyrics == "real lyrics"
        assert not store.replace_placeholder_lyrics(song.song_id, "late fetch")
        assert song.lyrics == "real lyrics"

    def test_increment_views(self, store):
        """Test views increase by exactly one per call"""
        song = _song()
        store.add_song(song)
        assert store.increment_views(song.song_id) == 1
        assert store.increment_views("missing") is None
        assert store.increment_views(None) is None

    def test_concurrent_views_are_not_lost(self, store):
        """Test parallel increments all land"""
        song = _song()
        store.add_song(song)

        def view():
            for _ in range(200):
                store.increment_views(song.song_id)

        threads = [threading.Thread(target=view) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert song.views == 1600


class TestAlbumsAndComments:
    """Test tracklists and comment lists"""

    def test_add_track_links_both_sides(self, store):
        """Test adding a track updates the album and the song"""
        song = _song()
        album = Album("1989", "taylor_swift", date(2014, 10, 27))
        store.add_song(song)
        store.add_album(album)

        assert store.add_track(album.album_id, song.song_id)
        assert album.tracklist == [song.song_id]
        assert song.album_id == album.album_id
        assert not store.add_track(album.album_id, song.song_id)

    def test_add_track_moves_song_between_albums(self, store):
        """Test a song is on at most one album"""
        song = _song()
        first = Album("First", "taylor_swift", date(2014, 1, 1))
        second = Album("Second", "taylor_swift", date(2015, 1, 1))
        store.add_song(song)
        store.add_album(first)
        store.add_album(second)

        store.add_track(first.album_id, song.song_id)
        store.add_track(second.album_id, song.song_id)

        assert first.tracklist == []
        assert second.tracklist == [song.song_id]
        assert song.album_id == second.album_id

    def test_remove_track(self, store):
        """Test removing a track clears the song's album"""
        song = _song()
        album = Album("1989", "taylor_swift", date(2014, 10, 27))
        store.add_song(song)
        store.add_album(album)
        store.add_track(album.album_id, song.song_id)

        assert store.remove_track(album.album_id, song.song_id)
        assert album.tracklist == []
        assert song.album_id is None
        assert not store.remove_track(album.album_id, song.song_id)

    def test_albums_by_artist(self, store):
        """Test albums are listed per owning artist"""
        mine = Album("1989", "taylor_swift", date(2014, 10, 27))
        theirs = Album("After Hours", "the_weeknd", date(2020, 3, 20))
        store.add_album(mine)
        store.add_album(theirs)
        assert store.albums_by_artist("Taylor_Swift") == [mine]

    def test_add_comment_appends_to_song(self, store):
        """Test a stored comment is listed on its song"""
        song = _song()
        store.add_song(song)
        comment = Comment(author="john_doe", song_id=song.song_id, text="great")

        assert store.add_comment(comment)
        assert song.comments == [comment.comment_id]
        assert store.get_song_comments(song.song_id) == [comment]

    def test_comment_on_unknown_song_refused(self, store):
        """Test comments need an existing song"""
        comment = Comment(author="john_doe", song_id="missing", text="great")
        assert not store.add_comment(comment)
        assert store.get_comments() == []


class TestQueuesAndChanges:
    """Test lyric edits, approval queue, notifications and change reporting"""

    def test_lyric_edit_add_and_remove(self, store):
        """Test edits are listed in order and removal of unknown edits is a no-op"""
        first = LyricEdit(suggested_by="john_doe", song_id="s1", original_lyrics="a", proposed_lyrics="b")
        second = LyricEdit(suggested_by="jane_smith", song_id="s1", original_lyrics="a", proposed_lyrics="c")
        store.add_lyric_edit(first)
        store.add_lyric_edit(second)
        assert store.get_lyric_edits() == [first, second]

        store.remove_lyric_edit(first)
        store.remove_lyric_edit(first)
        store.remove_lyric_edit(None)
        assert store.get_lyric_edits() == [second]
        assert store.get_lyric_edit(first.edit_id) is None

    def test_approval_queue(self, store, password_hash):
        """Test pending artists are listed once, in order"""
        a = Account.new_artist("a", password_hash, "A", 20, "a@example.com")
        b = Account.new_artist("b", password_hash, "B", 20, "b@example.com")
        store.add_account(a)
        store.add_account(b)
        store.add_artist_for_approval(a)
        store.add_artist_for_approval(b)
        store.add_artist_for_approval(a)

        assert store.get_artists_for_approval() == [a, b]
        store.remove_artist_for_approval(a)
        assert store.get_artists_for_approval() == [b]

    def test_blank_notifications_ignored(self, store, user):
        """Test empty messages are not queued"""
        store.add_user_notification(user, "")
        store.add_user_notification(user, "   ")
        store.add_user_notification(None, "hello")
        assert store.get_user_notifications(user) == []

    def test_notification_queues_are_separate(self, store, user):
        """Test user and artist queues are independent and clear together"""
        store.add_user_notification(user, "as user")
        store.add_artist_notification(user, "as artist")
        assert store.get_user_notifications(user) == ["as user"]
        assert store.get_artist_notifications(user) == ["as artist"]

        store.clear_notifications("JOHN_DOE")
        assert store.get_user_notifications(user) == []
        assert store.get_artist_notifications(user) == []

    def test_returned_lists_are_copies(self, store, user):
        """Test callers cannot mutate the store through returned lists"""
        store.add_user_notification(user, "hello")
        store.get_user_notifications(user).clear()
        store.get_accounts().clear()
        assert store.get_user_notifications(user) == ["hello"]
        assert store.get_accounts() == [user]

    def test_on_change_called_for_mutations(self):
        """Test every mutation reports a change"""
        changes = []
        store = CatalogStore(on_change=lambda: changes.append(1))

        store.add_account(Account.new_user("u", "h", "U", 20, "u@example.com"))
        song = _song()
        store.add_song(song)
        store.increment_views(song.song_id)
        assert len(changes) == 3

        store.get_song(song.song_id)
        store.get_accounts()
        assert len(changes) == 3

    def test_restore_has_no_side_effects(self):
        """Test restoring does not re-append comments or report changes"""
        changes = []
        store = CatalogStore(on_change=lambda: changes.append(1))
        song = _song()
        comment = Comment(author="john_doe", song_id=song.song_id, text="great")
        song.comments.append(comment.comment_id)

        store.restore(
            accounts=[], songs=[song], albums=[], comments=[comment], lyric_edits=[],
            artists_for_approval=[], user_notifications={}, artist_notifications={},
        )

        assert song.comments == [comment.comment_id]
        assert store.get_song_comments(song.song_id) == [comment]
        assert changes == []

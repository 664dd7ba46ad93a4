"""
Command-line interface for genius-catalog.

This module implements the CLI using Click. rich-click is used for the
help output colors.

Every command runs the same way:
    1. Load config.yaml (or --config)
    2. Set up logging in storage.log_directory
    3. Load the catalog snapshot (storage.data_file)
    4. Authenticate the caller if the command needs an identity
    5. Call the account, catalog or lyric edit service
    6. Save the snapshot if anything changed

Commands:
    Accounts:
        catalog register <username> --name ... --role user|artist|admin
        catalog pending-artists -u admin
        catalog verify-artist <artist> -u admin
        catalog reject-artist <artist> -u admin
        catalog follow <artist> -u <user>
        catalog unfollow <artist> -u <user>
        catalog following -u <user>
        catalog notifications -u <name> [--clear]
        catalog artists [query]

    Songs and albums:
        catalog create-song <title> --genre pop --release-date 2024-01-31 -u <artist>
        catalog create-album <title> --release-date 2024-01-31 -u <artist>
        catalog add-to-album <album-id> <song-id> -u <artist>
        catalog remove-from-album <album-id> <song-id> -u <artist>
        catalog edit-lyrics <song-id> --lyrics-file lyrics.txt -u <artist>
        catalog songs [query] [--artist <artist>]
        catalog albums [query] [--artist <artist>]
        catalog show <song-id>
        catalog top [--limit 10]
        catalog comment <song-id> <text> -u <user>
        catalog like <comment-id> -u <user> [--undo]
        catalog dislike <comment-id> -u <user> [--undo]

    Lyric edits:
        catalog propose-edit <song-id> --lyrics-file new.txt -u <user>
        catalog edits -u <artist|admin> [--all]
        catalog approve <edit-id> -u <artist|admin>
        catalog reject <edit-id> --reason "..." -u <artist|admin>

    Data:
        catalog import "<search query>"
        catalog seed

Passwords are asked for with a hidden prompt unless --password is given.

Exit Codes:
    0   success
    1   configuration error, or the command was refused
    2   catalog file error
    3   Genius API error
    4   other catalog error
    130 interrupted
"""

import sys
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable

import rich_click as click

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.GROUP_ARGUMENTS_OPTIONS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = ""
click.rich_click.MAX_WIDTH = 100
click.rich_click.COMMAND_GROUPS = {
    "catalog": [
        {
            "name": "Accounts",
            "commands": [
                "register", "pending-artists", "verify-artist", "reject-artist",
                "follow", "unfollow", "following", "notifications", "artists",
            ],
        },
        {
            "name": "Songs and Albums",
            "commands": [
                "create-song", "create-album", "add-to-album", "remove-from-album",
                "edit-lyrics", "songs", "albums", "show", "top", "comment", "like", "dislike",
            ],
        },
        {
            "name": "Lyric Edits",
            "commands": ["propose-edit", "edits", "approve", "reject"],
        },
        {
            "name": "Data",
            "commands": ["import", "seed"],
        },
    ],
}

from genius_catalog import __version__
from genius_catalog.core import (
    CatalogError,
    Config,
    ConfigError,
    GeniusError,
    PersistenceError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from genius_catalog.genius import GeniusClient, LyricsWorkerPool
from genius_catalog.models import Account, Album, Genre, LyricEdit, Role, Song
from genius_catalog.seed import seed_catalog
from genius_catalog.services import AccountService, CatalogService, LyricEditService
from genius_catalog.storage import CatalogSnapshot, CatalogStore

logger = get_logger(__name__)


DATE_FORMATS = ["%Y-%m-%d"]
DEFAULT_IMPORT_WAIT = 60


@dataclass
class Session:
    """Everything a command needs, built once per invocation."""
    config: Config
    snapshot: CatalogSnapshot
    store: CatalogStore
    accounts: AccountService
    catalog: CatalogService
    edits: LyricEditService


# ----------------------------------------------------------------------
# Shared options and helpers
# ----------------------------------------------------------------------

def identity_options(f: Callable) -> Callable:
    """Add --username and --password (hidden prompt) to a command."""
    f = click.option(
        "--password", "-p",
        prompt=True,
        hide_input=True,
        help="Password (prompted if omitted)"
    )(f)
    f = click.option(
        "--username", "-u",
        required=True,
        metavar="<username>",
        help="Account to act as"
    )(f)
    return f


def lyrics_options(f: Callable) -> Callable:
    """Add --lyrics and --lyrics-file to a command."""
    f = click.option(
        "--lyrics-file",
        type=click.File("r", encoding="utf-8"),
        default=None,
        metavar="<file>",
        help="Read lyrics from a file ('-' for stdin)"
    )(f)
    f = click.option(
        "--lyrics",
        default=None,
        metavar="<text>",
        help="Lyrics text"
    )(f)
    return f


def _parse_genre(ctx: click.Context, param: click.Parameter, value: str | None) -> Genre | None:
    if value is None:
        return None
    genre = Genre.from_string(value)
    if genre is None:
        raise click.BadParameter(
            f"Unknown genre '{value}'. Known genres: {', '.join(Genre.display_names())}"
        )
    return genre


def _read_lyrics(lyrics: str | None, lyrics_file) -> str | None:
    if lyrics is not None and lyrics_file is not None:
        raise click.UsageError("Use either --lyrics or --lyrics-file, not both")
    if lyrics_file is not None:
        return lyrics_file.read()
    return lyrics


def _authenticate(session: Session, username: str, password: str, *roles: Role) -> Account:
    """
    Log in, optionally requiring one of `roles`.

    Raises:
        click.ClickException: If the login fails or the role does not match.
    """
    account = session.accounts.login(username, password)
    if account is None:
        raise click.ClickException("Invalid username or password (or artist not verified yet)")
    if roles and account.role not in roles:
        allowed = " or ".join(r.display_name for r in roles)
        raise click.ClickException(f"This command requires a {allowed} account")
    return account


def _require(value, message: str):
    if value is None:
        raise click.ClickException(message)
    return value


def _refused(message: str) -> None:
    raise click.ClickException(message)


def _artist_label(session: Session, username: str) -> str:
    account = session.store.get_account_by_username(username)
    return account.name if account is not None else username


def _format_song(session: Session, song: Song) -> str:
    artists = ", ".join(_artist_label(session, a) for a in song.artists)
    return (
        f"[{song.song_id}] {song.title} - {artists} "
        f"({song.genre.display_name}, {song.release_date.isoformat()}) {song.views:,} views"
    )


def _format_album(session: Session, album: Album) -> str:
    return (
        f"[{album.album_id}] {album.title} - {_artist_label(session, album.artist)} "
        f"({album.release_date.isoformat()}, {len(album.tracklist)} tracks)"
    )


def _format_edit(session: Session, edit: LyricEdit) -> str:
    song = session.store.get_song(edit.song_id)
    title = song.title if song is not None else edit.song_id
    line = f"[{edit.edit_id}] {edit.status.value.upper():8} '{title}' by @{edit.suggested_by}"
    if edit.reviewed_by:
        line += f", reviewed by @{edit.reviewed_by}"
    return line


def _echo_list(lines: list[str], empty_message: str) -> None:
    if not lines:
        click.echo(empty_message)
        return
    for line in lines:
        click.echo(line)


# ----------------------------------------------------------------------
# Session lifecycle
# ----------------------------------------------------------------------

def _load_configuration(config_path: Path | None) -> Config:
    """
    Load and validate configuration from config.yaml.

    Raises:
        ConfigError: If configuration is invalid or an explicit file is missing.
    """
    return load_config(config_path)


def _open_session(config: Config) -> Session:
    """
    Load the catalog snapshot and build the services.

    Raises:
        PersistenceError: If the snapshot cannot be read.
    """
    snapshot = CatalogSnapshot(config.storage.data_file)
    store = snapshot.load()
    return Session(
        config=config,
        snapshot=snapshot,
        store=store,
        accounts=AccountService(store),
        catalog=CatalogService(store),
        edits=LyricEditService(store),
    )


def _run(ctx: click.Context, action: Callable[[Session], None]) -> None:
    """
    Run one command inside a session.

    Args:
        ctx: Click context carrying the group options.
        action: The command body.

    Raises:
        SystemExit: On fatal errors (with appropriate exit code).
    """
    options = ctx.ensure_object(dict)
    try:
        config = _load_configuration(options.get("config_path"))
        setup_logging(config.storage.log_directory, verbose=options.get("verbose", False))

        session = _open_session(config)
        action(session)

        if session.snapshot.flush(session.store):
            logger.debug("Catalog saved")

    except (click.ClickException, click.Abort):
        raise

    except ConfigError as e:
        click.echo(f"Configuration error: {e.message}", err=True)
        sys.exit(1)

    except PersistenceError as e:
        click.echo(f"Catalog file error: {e.message}", err=True)
        logger.error(f"Catalog file error: {e.message}", exc_info=True)
        sys.exit(2)

    except GeniusError as e:
        click.echo(f"Genius error: {e.message}", err=True)
        if e.is_auth_error:
            click.echo("Check genius.access_token in config.yaml or GENIUS_API_TOKEN", err=True)
        logger.error(f"Genius error: {e.message}", exc_info=True)
        sys.exit(3)

    except CatalogError as e:
        click.echo(f"Error: {e.message}", err=True)
        logger.error(f"Error: {e.message}", exc_info=True)
        sys.exit(4)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        logger.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(1)

    finally:
        shutdown_logging()


# ----------------------------------------------------------------------
# Group
# ----------------------------------------------------------------------

@click.group()
@click.option(
    "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml)"
)
@click.option(
    "--verbose", "-v",
    is_flag=True,
    help="Show debug messages on the console"
)
@click.version_option(__version__, prog_name="genius-catalog")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """
    genius-catalog: a music catalog with crowd-sourced lyrics corrections.

    Users follow artists, comment on songs and suggest lyric edits; artists
    publish songs and albums and review the edits on their songs;
    administrators verify new artists and may review any edit.

    \b
    GETTING STARTED:
        catalog seed                               # Demo accounts and songs
        catalog songs                              # List the catalog
        catalog show <song-id>                     # Read lyrics and comments
        catalog import "blinding lights"           # Import from Genius
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["verbose"] = verbose


# ----------------------------------------------------------------------
# Accounts
# ----------------------------------------------------------------------

@cli.command()
@click.argument("username")
@click.option("--name", required=True, help="Display name")
@click.option("--age", type=click.IntRange(min=0), required=True, help="Age in years")
@click.option("--email", required=True, help="Contact e-mail")
@click.option(
    "--role",
    type=click.Choice(["user", "artist"], case_sensitive=False),
    default="user",
    show_default=True,
    help="Account role (administrators come from seed data only)"
)
@click.option(
    "--password", "-p",
    prompt=True,
    hide_input=True,
    confirmation_prompt=True,
    help="Password (prompted if omitted)"
)
@click.pass_context
def register(ctx: click.Context, username: str, name: str, age: int, email: str, role: str, password: str) -> None:
    """Create an account. Artists must be verified by an admin before they can log in."""
    def action(session: Session) -> None:
        account = session.accounts.register(username, password, name, age, email, role)
        if account is None:
            _refused(f"Could not register '{username}': username taken or invalid")
        click.echo(f"Registered {account}")
        if account.is_artist:
            click.echo("Your artist account is waiting for administrator approval.")

    _run(ctx, action)


@cli.command("pending-artists")
@identity_options
@click.pass_context
def pending_artists(ctx: click.Context, username: str, password: str) -> None:
    """List artists waiting for verification (admin)."""
    def action(session: Session) -> None:
        _authenticate(session, username, password, Role.ADMIN)
        _echo_list(
            [f"@{a.username} - {a.name} ({a.email})" for a in session.accounts.get_artists_for_approval()],
            "No artists waiting for approval."
        )

    _run(ctx, action)


@cli.command("verify-artist")
@click.argument("artist")
@identity_options
@click.pass_context
def verify_artist(ctx: click.Context, artist: str, username: str, password: str) -> None:
    """Verify an artist account (admin)."""
    def action(session: Session) -> None:
        admin = _authenticate(session, username, password, Role.ADMIN)
        target = _require(session.store.get_account_by_username(artist), f"Unknown account '{artist}'")
        if not session.accounts.verify_artist(admin, target):
            _refused(f"'{artist}' is not an artist account")
        click.echo(f"Artist @{target.username} is verified.")

    _run(ctx, action)


@cli.command("reject-artist")
@click.argument("artist")
@identity_options
@click.pass_context
def reject_artist(ctx: click.Context, artist: str, username: str, password: str) -> None:
    """Turn down a pending artist application (admin)."""
    def action(session: Session) -> None:
        admin = _authenticate(session, username, password, Role.ADMIN)
        target = _require(session.store.get_account_by_username(artist), f"Unknown account '{artist}'")
        if not session.accounts.reject_artist(admin, target):
            _refused(f"'{artist}' is not waiting for approval")
        click.echo(f"Application of @{target.username} rejected.")

    _run(ctx, action)


@cli.command()
@click.argument("artist")
@identity_options
@click.pass_context
def follow(ctx: click.Context, artist: str, username: str, password: str) -> None:
    """Follow a verified artist."""
    def action(session: Session) -> None:
        user = _authenticate(session, username, password, Role.USER)
        target = _require(session.store.get_account_by_username(artist), f"Unknown account '{artist}'")
        if not session.accounts.follow_artist(user, target):
            _refused(f"Cannot follow '{artist}' (not a verified artist, or already followed)")
        click.echo(f"You are now following {target.name}.")

    _run(ctx, action)


@cli.command()
@click.argument("artist")
@identity_options
@click.pass_context
def unfollow(ctx: click.Context, artist: str, username: str, password: str) -> None:
    """Stop following an artist."""
    def action(session: Session) -> None:
        user = _authenticate(session, username, password, Role.USER)
        target = _require(session.store.get_account_by_username(artist), f"Unknown account '{artist}'")
        if not session.accounts.unfollow_artist(user, target):
            _refused(f"You are not following '{artist}'")
        click.echo(f"You no longer follow {target.name}.")

    _run(ctx, action)


@cli.command()
@click.option("--limit", type=int, default=5, show_default=True, help="New releases to show")
@identity_options
@click.pass_context
def following(ctx: click.Context, limit: int, username: str, password: str) -> None:
    """Show followed artists and their newest songs."""
    def action(session: Session) -> None:
        user = _authenticate(session, username, password, Role.USER)
        artists = session.accounts.get_followed_artists(user)
        _echo_list([f"@{a.username} - {a.name}" for a in artists], "You are not following anyone.")

        releases = session.accounts.get_new_releases_from_followed_artists(user, limit)
        if releases:
            click.echo("\nNew releases:")
            for song in releases:
                click.echo(f"  {_format_song(session, song)}")

    _run(ctx, action)


@cli.command()
@click.option("--clear", is_flag=True, help="Empty the notification queue after showing it")
@identity_options
@click.pass_context
def notifications(ctx: click.Context, clear: bool, username: str, password: str) -> None:
    """Show your notifications."""
    def action(session: Session) -> None:
        account = _authenticate(session, username, password)
        messages = session.accounts.get_user_notifications(account) + \
            session.accounts.get_artist_notifications(account)
        _echo_list([f"- {m}" for m in messages], "No notifications.")
        if clear and messages:
            session.accounts.clear_notifications(account)
            click.echo("Notifications cleared.")

    _run(ctx, action)


@cli.command()
@click.argument("query", required=False)
@click.pass_context
def artists(ctx: click.Context, query: str | None) -> None:
    """Search verified artists by username or name."""
    def action(session: Session) -> None:
        _echo_list(
            [f"@{a.username} - {a.name}" for a in session.accounts.search_artists(query)],
            "No artists found."
        )

    _run(ctx, action)


# ----------------------------------------------------------------------
# Songs and albums
# ----------------------------------------------------------------------

@cli.command("create-song")
@click.argument("title")
@click.option("--genre", required=True, callback=_parse_genre, help="Genre, e.g. pop, hip-hop, 'R&B'")
@click.option(
    "--release-date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=lambda: datetime.now().strftime("%Y-%m-%d"),
    help="Release date (YYYY-MM-DD, default today)"
)
@lyrics_options
@identity_options
@click.pass_context
def create_song(
    ctx: click.Context,
    title: str,
    genre: Genre,
    release_date: datetime,
    lyrics: str | None,
    lyrics_file,
    username: str,
    password: str
) -> None:
    """Publish a song (artist)."""
    text = _read_lyrics(lyrics, lyrics_file)

    def action(session: Session) -> None:
        artist = _authenticate(session, username, password, Role.ARTIST)
        song = session.catalog.create_song(title, text, artist, genre, release_date.date())
        click.echo(f"Created {_format_song(session, song)}")

    _run(ctx, action)


@cli.command("create-album")
@click.argument("title")
@click.option(
    "--release-date",
    type=click.DateTime(formats=DATE_FORMATS),
    default=lambda: datetime.now().strftime("%Y-%m-%d"),
    help="Release date (YYYY-MM-DD, default today)"
)
@identity_options
@click.pass_context
def create_album(ctx: click.Context, title: str, release_date: datetime, username: str, password: str) -> None:
    """Create an album (verified artist)."""
    def action(session: Session) -> None:
        artist = _authenticate(session, username, password, Role.ARTIST)
        album = session.catalog.create_album(title, artist, release_date.date())
        if album is None:
            _refused("Album not created: title is empty")
        click.echo(f"Created {_format_album(session, album)}")

    _run(ctx, action)


@cli.command("add-to-album")
@click.argument("album_id")
@click.argument("song_id")
@identity_options
@click.pass_context
def add_to_album(ctx: click.Context, album_id: str, song_id: str, username: str, password: str) -> None:
    """Append one of your songs to one of your albums (artist)."""
    def action(session: Session) -> None:
        artist = _authenticate(session, username, password, Role.ARTIST)
        album = _require(session.catalog.get_album(album_id), f"Unknown album '{album_id}'")
        song = _require(session.catalog.get_song(song_id), f"Unknown song '{song_id}'")
        if album.artist != artist.key or not session.catalog.add_song_to_album(album, song):
            _refused("Song not added: you must own both, and the song may already be on the album")
        click.echo(f"Added '{song.title}' to '{album.title}' as track {len(album.tracklist)}.")

    _run(ctx, action)


@cli.command("remove-from-album")
@click.argument("album_id")
@click.argument("song_id")
@identity_options
@click.pass_context
def remove_from_album(ctx: click.Context, album_id: str, song_id: str, username: str, password: str) -> None:
    """Remove a song from one of your albums (artist)."""
    def action(session: Session) -> None:
        artist = _authenticate(session, username, password, Role.ARTIST)
        album = _require(session.catalog.get_album(album_id), f"Unknown album '{album_id}'")
        song = _require(session.catalog.get_song(song_id), f"Unknown song '{song_id}'")
        if album.artist != artist.key or not session.catalog.remove_song_from_album(album, song):
            _refused("Song not removed: not your album, or the song is not on it")
        click.echo(f"Removed '{song.title}' from '{album.title}'.")

    _run(ctx, action)


@cli.command("edit-lyrics")
@click.argument("song_id")
@lyrics_options
@identity_options
@click.pass_context
def edit_lyrics(ctx: click.Context, song_id: str, lyrics: str | None, lyrics_file, username: str, password: str) -> None:
    """Replace the lyrics of one of your songs (artist)."""
    text = _read_lyrics(lyrics, lyrics_file)
    if text is None:
        raise click.UsageError("Give the new lyrics with --lyrics or --lyrics-file")

    def action(session: Session) -> None:
        artist = _authenticate(session, username, password, Role.ARTIST)
        song = _require(session.catalog.get_song(song_id), f"Unknown song '{song_id}'")
        if not session.catalog.update_lyrics(artist, song, text):
            _refused("Only an artist of this song can edit its lyrics")
        click.echo(f"Lyrics of '{song.title}' updated.")

    _run(ctx, action)


@cli.command()
@click.argument("query", required=False)
@click.option("--artist", default=None, metavar="<username>", help="Only songs of this artist, album tracks first")
@click.pass_context
def songs(ctx: click.Context, query: str | None, artist: str | None) -> None:
    """List or search songs by title or artist."""
    def action(session: Session) -> None:
        if artist is not None:
            owner = _require(session.store.get_account_by_username(artist), f"Unknown account '{artist}'")
            found = session.catalog.get_all_artist_songs(owner)
            if query:
                found = [s for s in found if query.lower() in s.title.lower()]
        else:
            found = session.catalog.search_songs(query)
        _echo_list([_format_song(session, s) for s in found], "No songs found.")

    _run(ctx, action)


@cli.command()
@click.argument("query", required=False)
@click.option("--artist", default=None, metavar="<username>", help="Only albums of this artist")
@click.pass_context
def albums(ctx: click.Context, query: str | None, artist: str | None) -> None:
    """List or search albums by title."""
    def action(session: Session) -> None:
        owner = None
        if artist is not None:
            owner = _require(session.store.get_account_by_username(artist), f"Unknown account '{artist}'")
        _echo_list(
            [_format_album(session, a) for a in session.catalog.search_albums(query, owner)],
            "No albums found."
        )

    _run(ctx, action)


@cli.command()
@click.argument("song_id")
@click.pass_context
def show(ctx: click.Context, song_id: str) -> None:
    """Show a song with its lyrics and comments. Counts as a view."""
    def action(session: Session) -> None:
        song = _require(session.catalog.get_song(song_id), f"Unknown song '{song_id}'")
        session.catalog.add_view_to_song(song)

        click.secho(song.title, bold=True)
        click.echo(_format_song(session, song))
        if song.album_id:
            album = session.catalog.get_album(song.album_id)
            if album is not None:
                click.echo(f"Album: {album.title}")
        click.echo("")
        click.echo(song.lyrics or "(no lyrics)")

        comments = session.catalog.get_song_comments(song)
        if comments:
            click.echo("\nComments:")
            for comment in comments:
                click.echo(
                    f"  [{comment.comment_id}] @{comment.author} "
                    f"(+{comment.likes}/-{comment.dislikes}): {comment.text}"
                )

    _run(ctx, action)


@cli.command()
@click.option("--limit", type=int, default=10, show_default=True, help="Number of songs")
@click.pass_context
def top(ctx: click.Context, limit: int) -> None:
    """Most viewed songs."""
    def action(session: Session) -> None:
        ranked = session.catalog.get_top_songs(limit)
        _echo_list(
            [f"{i:>2}. {_format_song(session, s)}" for i, s in enumerate(ranked, start=1)],
            "No songs yet."
        )

    _run(ctx, action)


@cli.command()
@click.argument("song_id")
@click.argument("text")
@identity_options
@click.pass_context
def comment(ctx: click.Context, song_id: str, text: str, username: str, password: str) -> None:
    """Comment on a song (user)."""
    def action(session: Session) -> None:
        user = _authenticate(session, username, password, Role.USER)
        song = _require(session.catalog.get_song(song_id), f"Unknown song '{song_id}'")
        posted = _require(session.catalog.add_comment(user, song, text), "Comment text cannot be empty")
        click.echo(f"Comment {posted.comment_id} posted on '{song.title}'.")

    _run(ctx, action)


def _reaction_command(name: str, add: Callable, remove: Callable, verb: str) -> None:
    @cli.command(name, help=f"{verb.capitalize()} a comment, or take it back with --undo (user).")
    @click.argument("comment_id")
    @click.option("--undo", is_flag=True, help=f"Remove a previous {verb}")
    @identity_options
    @click.pass_context
    def command(ctx: click.Context, comment_id: str, undo: bool, username: str, password: str) -> None:
        def action(session: Session) -> None:
            _authenticate(session, username, password, Role.USER)
            target = _require(session.catalog.get_comment(comment_id), f"Unknown comment '{comment_id}'")
            (remove if undo else add)(session.catalog, target)
            click.echo(f"Comment {target.comment_id}: +{target.likes}/-{target.dislikes}")

        _run(ctx, action)


_reaction_command("like", CatalogService.like_comment, CatalogService.remove_like, "like")
_reaction_command("dislike", CatalogService.dislike_comment, CatalogService.remove_dislike, "dislike")


# ----------------------------------------------------------------------
# Lyric edits
# ----------------------------------------------------------------------

@cli.command("propose-edit")
@click.argument("song_id")
@lyrics_options
@click.option("--explanation", "-e", default="", help="Why the lyrics should change")
@identity_options
@click.pass_context
def propose_edit(
    ctx: click.Context,
    song_id: str,
    lyrics: str | None,
    lyrics_file,
    explanation: str,
    username: str,
    password: str
) -> None:
    """Suggest corrected lyrics for a song (user)."""
    text = _read_lyrics(lyrics, lyrics_file)
    if text is None:
        raise click.UsageError("Give the proposed lyrics with --lyrics or --lyrics-file")

    def action(session: Session) -> None:
        user = _authenticate(session, username, password, Role.USER)
        song = _require(session.catalog.get_song(song_id), f"Unknown song '{song_id}'")
        edit = _require(session.edits.propose(user, song, text, explanation), "Edit not submitted")
        click.echo(f"Edit {edit.edit_id} submitted for review.")

    _run(ctx, action)


@cli.command()
@click.option("--all", "show_all", is_flag=True, help="Include approved and rejected edits")
@identity_options
@click.pass_context
def edits(ctx: click.Context, show_all: bool, username: str, password: str) -> None:
    """List lyric edits to review (artist: own songs, admin: every song)."""
    def action(session: Session) -> None:
        reviewer = _authenticate(session, username, password, Role.ARTIST, Role.ADMIN)
        if reviewer.is_admin:
            found = session.edits.all_edits()
            if not show_all:
                found = [e for e in found if e.is_pending]
        elif show_all:
            found = session.edits.edits_for_artist(reviewer)
        else:
            found = session.edits.pending_edits_for_artist(reviewer)

        if not found:
            click.echo("No lyric edits.")
            return
        for edit in found:
            click.echo(_format_edit(session, edit))
            if edit.explanation:
                click.echo(f"    Why: {edit.explanation}")
            click.echo(f"    Was: {edit.original_lyrics[:80]!r}")
            click.echo(f"    New: {edit.proposed_lyrics[:80]!r}")

    _run(ctx, action)


@cli.command()
@click.argument("edit_id")
@identity_options
@click.pass_context
def approve(ctx: click.Context, edit_id: str, username: str, password: str) -> None:
    """Approve a lyric edit and apply it to the song (artist or admin)."""
    def action(session: Session) -> None:
        reviewer = _authenticate(session, username, password, Role.ARTIST, Role.ADMIN)
        edit = _require(session.edits.get_edit(edit_id), f"Unknown edit '{edit_id}'")
        if not session.edits.approve(edit, reviewer):
            _refused("Edit not approved: already decided, or not your song")
        click.echo(f"Edit {edit.edit_id} approved, lyrics updated.")

    _run(ctx, action)


@cli.command("reject")
@click.argument("edit_id")
@click.option("--reason", "-r", required=True, help="Why the edit is rejected")
@identity_options
@click.pass_context
def reject_edit(ctx: click.Context, edit_id: str, reason: str, username: str, password: str) -> None:
    """Reject a lyric edit (artist or admin)."""
    def action(session: Session) -> None:
        reviewer = _authenticate(session, username, password, Role.ARTIST, Role.ADMIN)
        edit = _require(session.edits.get_edit(edit_id), f"Unknown edit '{edit_id}'")
        if not session.edits.reject(edit, reviewer, reason):
            _refused("Edit not rejected: already decided, not your song, or empty reason")
        click.echo(f"Edit {edit.edit_id} rejected.")

    _run(ctx, action)


# ----------------------------------------------------------------------
# Data
# ----------------------------------------------------------------------

@cli.command("import")
@click.argument("query")
@click.option(
    "--wait",
    type=click.IntRange(min=0),
    default=DEFAULT_IMPORT_WAIT,
    show_default=True,
    help="Seconds to wait for lyrics before saving"
)
@click.pass_context
def import_songs(ctx: click.Context, query: str, wait: int) -> None:
    """Import songs from a Genius search, fetching their lyrics in the background."""
    def action(session: Session) -> None:
        config = session.config
        if not config.genius.access_token:
            raise GeniusError("Genius access token not configured", is_auth_error=True)

        client = GeniusClient(config.genius.access_token, config.lyrics.timeout, config.lyrics.retries)
        with LyricsWorkerPool(session.store, client, config.lyrics.threads) as pool:
            session.catalog.genius = client
            session.catalog.lyrics_pool = pool

            imported = session.catalog.import_songs(query)
            if not imported:
                click.echo(f"No songs imported for '{query}'.")
                return

            missing = pool.drain(timeout=wait, show_progress=True)

        for song in imported:
            click.echo(_format_song(session, song))
        if missing:
            click.echo(f"{missing} songs have no lyrics yet (fetch did not finish).")

    _run(ctx, action)


@cli.command()
@click.pass_context
def seed(ctx: click.Context) -> None:
    """Fill an empty catalog with demo accounts, songs and albums."""
    def action(session: Session) -> None:
        summary = seed_catalog(session.store)
        if summary is None:
            _refused("The catalog already has accounts; demo data is only added to an empty catalog")
        click.echo(
            f"Added {summary.accounts} accounts, {summary.songs} songs, {summary.albums} albums, "
            f"{summary.comments} comments, {summary.lyric_edits} lyric edits and {summary.follows} follows."
        )
        click.echo("Log in as admin/admin123, taylor_swift/swift123 or john_doe/doe123.")

    _run(ctx, action)


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `catalog` from the command line.
    It invokes the Click CLI group.
    """
    cli()


if __name__ == "__main__":
    main()

# update_news.py
# Purpose:
#  - scan source/ntc<N>.html news articles
#  - extract title, description, image and date (fallback chains, BeautifulSoup)
#  - splice the news carousel into index.html (#news-container, #carousel-dots)
#
# Usage:
#   python update_news.py          (same as "update")
#   python update_news.py update
#   python update_news.py watch    (re-run on every ntc<N>.html change)
#   python update_news.py init     (write example articles, then update)

import logging
import re
import sys
import threading
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

import pytz
from babel.dates import format_date
from bs4 import BeautifulSoup
from dateutil import parser as dateparser
from watchdog.events import (
    EVENT_TYPE_CLOSED,
    EVENT_TYPE_CREATED,
    EVENT_TYPE_DELETED,
    EVENT_TYPE_MODIFIED,
    EVENT_TYPE_MOVED,
    FileSystemEventHandler,
)
from watchdog.observers import Observer

from site_errors import ErrorKind, SiteError, list_dir, read_text, report, write_text

logger = logging.getLogger(__name__)

ROOT = Path(__file__).resolve().parent
SOURCE_DIR = ROOT / "source"
INDEX_FILE = ROOT / "index.html"

NEWS_FILE_PATTERN = re.compile(r"ntc(\d+)\.html")
MAX_NEWS_ITEMS = 10
TITLE_MAX = 100
DESCRIPTION_MAX = 200

DEFAULT_TITLE = "Notícia sem título"
DEFAULT_DESCRIPTION = "Descrição não disponível"
DEFAULT_NEWS_IMAGE = "default-news.jpg"
IMAGE_EXTENSIONS = ("jpg", "jpeg", "png", "webp")

NEWS_CONTAINER_ID = "news-container"
DOTS_CONTAINER_ID = "carousel-dots"

DISPLAY_TIMEZONE = "America/Sao_Paulo"
DISPLAY_LOCALE = "pt_BR"
WATCH_DEBOUNCE_SECONDS = 1.0
# "opened" and "closed_no_write" come from our own reads and are ignored
CHANGE_EVENT_TYPES = {EVENT_TYPE_CREATED, EVENT_TYPE_MODIFIED, EVENT_TYPE_DELETED, EVENT_TYPE_MOVED, EVENT_TYPE_CLOSED}
CONTENT_EVENT_TYPES = {EVENT_TYPE_MODIFIED, EVENT_TYPE_CLOSED}

EMPTY_NEWS_HTML = '<p class="text-center text-gray-600">Nenhuma notícia disponível.</p>'

Extractor = Callable[[BeautifulSoup], Optional[str]]


@dataclass(frozen=True)
class NewsItem:
    id: str
    title: str
    description: str
    image: str
    date: str
    link: str


def norm_space(s: str) -> str:
    return re.sub(r"\s+", " ", s or "").strip()


def news_number(filename: str) -> int:
    m = NEWS_FILE_PATTERN.fullmatch(filename)
    return int(m.group(1)) if m else -1


def find_news_files(source_dir: Path) -> list[str]:
    """
    ntc<N>.html names, newest (highest N) first
    """
    try:
        names = list_dir(source_dir)
    except SiteError as err:
        report(err, logger)
        return []

    by_number: dict[int, str] = {}
    for name in names:
        number = news_number(name)
        if number < 0:
            continue
        if number in by_number:
            logger.warning("Skipping %s: same number as %s", name, by_number[number])
            continue
        by_number[number] = name

    news_files = [by_number[n] for n in sorted(by_number, reverse=True)]
    logger.info("Found %d news files: %s", len(news_files), ", ".join(news_files))
    return news_files


# --- extractors ----------------------------------------------------------

def meta_content(**attrs: str) -> Extractor:
    def extract(soup: BeautifulSoup) -> Optional[str]:
        tag = soup.find("meta", attrs=attrs)
        return tag.get("content") if tag else None
    return extract


def element_text(selector: str) -> Extractor:
    def extract(soup: BeautifulSoup) -> Optional[str]:
        tag = soup.select_one(selector)
        return tag.get_text() if tag else None
    return extract


def element_src(selector: str) -> Extractor:
    def extract(soup: BeautifulSoup) -> Optional[str]:
        tag = soup.select_one(selector)
        return tag.get("src") if tag else None
    return extract


TITLE_CHAIN: tuple[Extractor, ...] = (
    meta_content(name="title"),
    meta_content(property="og:title"),
    element_text("h1"),
    element_text("title"),
)

DESCRIPTION_CHAIN: tuple[Extractor, ...] = (
    meta_content(name="description"),
    meta_content(property="og:description"),
    element_text(".news-description"),
    element_text(".description"),
    element_text("p"),
)

IMAGE_CHAIN: tuple[Extractor, ...] = (
    meta_content(property="og:image"),
    meta_content(name="twitter:image"),
    element_src(".news-image img[src]"),
    element_src(".featured-image img[src]"),
    element_src("img[src]"),
)

DATE_CHAIN: tuple[Extractor, ...] = (
    meta_content(name="date"),
    meta_content(property="article:published_time"),
    element_text(".news-date"),
    element_text(".date"),
    element_text("time"),
)


def first_match(soup: BeautifulSoup, chain: tuple[Extractor, ...]) -> Optional[str]:
    for extract in chain:
        value = (extract(soup) or "").strip()
        if value:
            return value
    return None


def extract_title(soup: BeautifulSoup) -> str:
    return norm_space(first_match(soup, TITLE_CHAIN) or DEFAULT_TITLE)[:TITLE_MAX]


def extract_description(soup: BeautifulSoup) -> str:
    return norm_space(first_match(soup, DESCRIPTION_CHAIN) or DEFAULT_DESCRIPTION)[:DESCRIPTION_MAX]


def is_absolute_ref(ref: str) -> bool:
    # "/img/a.jpg", "https://...", "data:..."
    return ref.startswith("/") or re.match(r"[a-zA-Z][a-zA-Z0-9+.\-]*:", ref) is not None


def extract_image(soup: BeautifulSoup, filename: str, source_dir: Path) -> str:
    """
    Image priority:
      1) og:image / twitter:image meta
      2) .news-image img, .featured-image img, first img
      3) <stem>.jpg/.jpeg/.png/.webp next to the article
      4) DEFAULT_NEWS_IMAGE
    Paths are returned relative to index.html.
    """
    prefix = source_dir.name
    ref = first_match(soup, IMAGE_CHAIN)
    if ref:
        return ref if is_absolute_ref(ref) else f"{prefix}/{ref}"

    stem = Path(filename).stem
    for ext in IMAGE_EXTENSIONS:
        if (source_dir / f"{stem}.{ext}").is_file():
            return f"{prefix}/{stem}.{ext}"

    return f"{prefix}/{DEFAULT_NEWS_IMAGE}"


def format_display_date(value: datetime) -> str:
    if value.tzinfo is None:
        value = pytz.utc.localize(value)
    local = value.astimezone(pytz.timezone(DISPLAY_TIMEZONE))
    return format_date(local.date(), format="medium", locale=DISPLAY_LOCALE)


def parse_date(raw: str, path: Optional[Path] = None) -> datetime:
    try:
        return dateparser.parse(raw)
    except (ValueError, OverflowError) as exc:
        raise SiteError(ErrorKind.DATE_UNPARSABLE, f"invalid date {raw!r}", path) from exc


def extract_date(soup: BeautifulSoup, path: Optional[Path] = None, now: Optional[datetime] = None) -> str:
    raw = first_match(soup, DATE_CHAIN)
    if raw:
        try:
            return format_display_date(parse_date(raw, path))
        except SiteError as err:
            report(err, logger)
    return format_display_date(now or datetime.now(pytz.utc))


def extract_news_metadata(filename: str, source_dir: Path, now: Optional[datetime] = None) -> NewsItem:
    path = source_dir / filename
    try:
        soup = BeautifulSoup(read_text(path), "html.parser")
    except SiteError as err:
        raise SiteError(ErrorKind.ITEM_PARSE_FAILED, err.message, path) from err
    except Exception as exc:
        raise SiteError(ErrorKind.ITEM_PARSE_FAILED, f"cannot parse: {exc}", path) from exc

    return NewsItem(
        id=path.stem,
        title=extract_title(soup),
        description=extract_description(soup),
        image=extract_image(soup, filename, source_dir),
        date=extract_date(soup, path, now),
        link=f"{source_dir.name}/{filename}",
    )


def collect_news(source_dir: Path, limit: int = MAX_NEWS_ITEMS, now: Optional[datetime] = None) -> list[NewsItem]:
    items = []
    skipped = 0
    for filename in find_news_files(source_dir):
        try:
            items.append(extract_news_metadata(filename, source_dir, now))
        except SiteError as err:
            report(err, logger)
            skipped += 1

    items.sort(key=lambda it: news_number(f"{it.id}.html"), reverse=True)
    logger.info("Parsed %d news items, skipped %d", len(items), skipped)
    return items[:limit]


# --- render / splice -----------------------------------------------------

CARD_TEMPLATE = """
                <a href="{link}" class="news-card bg-white rounded-lg overflow-hidden shadow-md transition duration-300 block">
                    <img src="{image}" alt="{title}" class="news-image">
                    <div class="p-4">
                        <h3 class="font-medium text-gray-800 mb-1">{title}</h3>
                        <p class="text-gray-600 text-sm mb-2">{description}</p>
                        <p class="text-gray-500 text-xs">{date}</p>
                    </div>
                </a>
"""


def render_news_html(items: list[NewsItem]) -> tuple[str, str]:
    """
    (cards_html, dots_html); no escaping of item text
    """
    if not items:
        return EMPTY_NEWS_HTML, ""

    cards = []
    dots = []
    for index, item in enumerate(items):
        cards.append(CARD_TEMPLATE.format(
            link=item.link,
            image=item.image,
            title=item.title,
            description=item.description,
            date=item.date,
        ))
        active = "active" if index == 0 else ""
        dots.append(f'<span class="dot {active}" data-index="{index}"></span>')
    return "".join(cards), "".join(dots)


def replace_inner(soup: BeautifulSoup, element_id: str, fragment: str) -> None:
    target = soup.find(id=element_id)
    if target is None:
        raise SiteError(ErrorKind.TARGET_ELEMENT_MISSING, f"element #{element_id} not found")
    target.clear()
    for node in list(BeautifulSoup(fragment, "html.parser").contents):
        target.append(node)


def splice_index(html: str, news_html: str, dots_html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for element_id, fragment in ((NEWS_CONTAINER_ID, news_html), (DOTS_CONTAINER_ID, dots_html)):
        try:
            replace_inner(soup, element_id, fragment)
        except SiteError as err:
            report(err, logger)
    return str(soup)


def update_index_html(source_dir: Path = SOURCE_DIR, index_file: Path = INDEX_FILE) -> list[NewsItem]:
    logger.info("Updating news in %s", index_file.name)
    items = collect_news(source_dir)
    news_html, dots_html = render_news_html(items)

    try:
        # strict: undecodable bytes elsewhere in the page must not be dropped on rewrite
        html = read_text(index_file, errors="strict")
        write_text(index_file, splice_index(html, news_html, dots_html))
    except SiteError as err:
        report(err, logger)
        return items

    print(f"OK: wrote {index_file.name} ({len(items)} news)")
    for n, item in enumerate(items, start=1):
        print(f"{n}. {item.title} ({item.date})")
    return items


# --- example content -----------------------------------------------------

EXAMPLE_NEWS = [
    {
        "filename": "ntc1.html",
        "title": "Nova Coleção de Pelúcias Chegou!",
        "description": "Confira nossa mais nova coleção de pelúcias com designs exclusivos e materiais de alta qualidade.",
        "content": "Estamos muito animados em apresentar nossa mais nova coleção de pelúcias, com designs únicos e materiais de primeira qualidade. Cada peça foi cuidadosamente desenvolvida para proporcionar máximo conforto e durabilidade.",
    },
    {
        "filename": "ntc2.html",
        "title": "Promoção Especial do Mês",
        "description": "Aproveite descontos de até 30% em pelúcias selecionadas durante todo o mês.",
        "content": "Durante todo este mês, você pode aproveitar descontos especiais em nossa seleção de pelúcias premium. Uma oportunidade única de presentear alguém especial ou renovar sua coleção pessoal.",
    },
    {
        "filename": "ntc3.html",
        "title": "Lançamento: Linha Eco-Friendly",
        "description": "Apresentamos nossa nova linha de pelúcias sustentáveis, feitas com materiais reciclados.",
        "content": "Com o compromisso de cuidar do meio ambiente, lançamos nossa linha eco-friendly de pelúcias. Produzidas com materiais 100% reciclados, mantendo a mesma qualidade e fofura que você já conhece.",
    },
]

EXAMPLE_TEMPLATE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <meta name="description" content="{description}">
    <meta name="date" content="{iso_date}">
    <meta property="og:title" content="{title}">
    <meta property="og:description" content="{description}">
    <meta property="og:image" content="{image}">
</head>
<body>
    <article>
        <h1>{title}</h1>
        <div class="news-date">{display_date}</div>
        <img src="{image}" alt="{title}" class="featured-image">
        <p class="description">{description}</p>
        <p>{content}</p>
    </article>
</body>
</html>
"""


def render_example(example: dict, now: datetime) -> str:
    return EXAMPLE_TEMPLATE.format(
        title=example["title"],
        description=example["description"],
        content=example["content"],
        image=Path(example["filename"]).with_suffix(".jpg").name,
        iso_date=now.isoformat(),
        display_date=format_display_date(now),
    )


def ensure_directory_structure(source_dir: Path = SOURCE_DIR) -> None:
    if source_dir.exists():
        return
    logger.info("Creating directory %s", source_dir)
    source_dir.mkdir(parents=True, exist_ok=True)
    write_text(source_dir / EXAMPLE_NEWS[0]["filename"], render_example(EXAMPLE_NEWS[0], datetime.now(pytz.utc)))
    print(f"OK: created example {EXAMPLE_NEWS[0]['filename']}")


def create_example_news(source_dir: Path = SOURCE_DIR) -> None:
    now = datetime.now(pytz.utc)
    for example in EXAMPLE_NEWS:
        write_text(source_dir / example["filename"], render_example(example, now))
        print(f"OK: created {example['filename']}")


# --- watch ---------------------------------------------------------------

class NewsWatcher(FileSystemEventHandler):
    """
    Debounced re-run of update_index_html on ntc<N>.html events.
    Only create/modify/delete/move/close-after-write events count, and
    "modified" needs a new mtime or size. At most one update runs at a time;
    a trigger that fires during a run is rescheduled.
    """

    def __init__(self, source_dir: Path, index_file: Path, delay: float = WATCH_DEBOUNCE_SECONDS,
                 update: Callable[[Path, Path], object] = update_index_html):
        self.source_dir = source_dir
        self.index_file = index_file
        self.delay = delay
        self._update = update
        self._timer: Optional[threading.Timer] = None
        self._timer_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._seen: dict[str, tuple[int, int]] = {}
        self._prime()

    def on_any_event(self, event) -> None:
        if event.is_directory or event.event_type not in CHANGE_EVENT_TYPES:
            return
        paths = [str(p) for p in (event.src_path, getattr(event, "dest_path", "")) if p]
        news_paths = [p for p in paths if NEWS_FILE_PATTERN.fullmatch(Path(p).name)]
        if not news_paths:
            return
        # reads during an update can bump atime, which arrives as "modified"
        if event.event_type in CONTENT_EVENT_TYPES and not any(self._content_changed(p) for p in news_paths):
            return
        logger.info("Change detected: %s (%s)", Path(news_paths[0]).name, event.event_type)
        self.schedule()

    def _prime(self) -> None:
        if not self.source_dir.is_dir():
            return
        for p in self.source_dir.rglob("*.html"):
            if NEWS_FILE_PATTERN.fullmatch(p.name):
                self._content_changed(str(p))

    def _content_changed(self, path: str) -> bool:
        try:
            st = Path(path).stat()
        except OSError:
            return True
        stamp = (st.st_mtime_ns, st.st_size)
        if self._seen.get(path) == stamp:
            return False
        self._seen[path] = stamp
        return True

    def schedule(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self.run_once)
            self._timer.daemon = True
            self._timer.start()

    def run_once(self) -> bool:
        if not self._run_lock.acquire(blocking=False):
            logger.info("Update already running, rescheduling")
            self.schedule()
            return False
        try:
            self._update(self.source_dir, self.index_file)
        finally:
            self._run_lock.release()
        return True

    def cancel(self) -> None:
        with self._timer_lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


def watch_for_changes(source_dir: Path = SOURCE_DIR, index_file: Path = INDEX_FILE) -> None:
    handler = NewsWatcher(source_dir, index_file)
    observer = Observer()
    observer.schedule(handler, str(source_dir), recursive=True)
    observer.start()
    print(f"Watching {source_dir} ... press Ctrl+C to stop")
    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        print("Stopping watch...")
    finally:
        handler.cancel()
        observer.stop()
        observer.join()


USAGE = """Usage: python update_news.py [command]

Commands:
  update    update index.html with the latest news (default)
  watch     watch source/ and update automatically
  init      write example news files, then update
"""


def main(argv: Optional[list[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    # first argument is the command, whatever it looks like ("-h" included)
    command = args[0] if args else "update"

    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")

    try:
        if command not in ("update", "watch", "init"):
            print(USAGE)
            return 0

        ensure_directory_structure(SOURCE_DIR)

        if command == "update":
            update_index_html(SOURCE_DIR, INDEX_FILE)
        elif command == "watch":
            update_index_html(SOURCE_DIR, INDEX_FILE)
            watch_for_changes(SOURCE_DIR, INDEX_FILE)
        elif command == "init":
            create_example_news(SOURCE_DIR)
            update_index_html(SOURCE_DIR, INDEX_FILE)
    except Exception:
        logger.exception("update_news failed")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())

"""Generators for scripts shared by the rendered pages."""

from __future__ import annotations

from pathlib import Path

from .io_utils import ensure_dir

LOAD_MORE_JS = """
(function loadMorePosts() {
  const button = document.querySelector('button[data-action="load-more"]');
  const list = document.querySelector('[data-post-list]');
  if (!button || !list) return;

  const hrefPrefix = list.dataset.postHrefPrefix || 'post/';
  const dateFormat = list.dataset.dateFormat || '%-d %b %Y';
  const monthNames = (list.dataset.monthNames || '').split(',');

  // Mirrors BuildContext.format_date on the timestamp's own wall clock.
  function formatDate(stamp) {
    const match = /^(\\d{4})-(\\d{2})-(\\d{2})T(\\d{2}):(\\d{2})/.exec(stamp);
    if (!match) return stamp;
    const [, year, month, day, hour, minute] = match;
    const values = {
      '-d': String(Number(day)),
      d: day,
      b: monthNames[Number(month) - 1] || month,
      m: month,
      Y: year,
      H: hour,
      M: minute,
      '%': '%',
    };
    return dateFormat.replace(/%(-d|[dbmYHM%])/g, (token, directive) => values[directive]);
  }

  function summaryFor(doc) {
    const data = doc.data || {};
    const link = document.createElement('a');
    link.className = 'post';
    link.href = hrefPrefix + encodeURIComponent(doc.uid) + '/';

    const title = document.createElement('h2');
    title.className = 'post-title';
    title.textContent = data.title || '';
    const subtitle = document.createElement('p');
    subtitle.className = 'post-subtitle';
    subtitle.textContent = data.subtitle || '';

    const info = document.createElement('div');
    info.className = 'post-info';
    if (doc.first_publication_date) {
      const time = document.createElement('time');
      time.className = 'info';
      time.dateTime = doc.first_publication_date;
      time.textContent = formatDate(doc.first_publication_date);
      info.appendChild(time);
    }
    const author = document.createElement('span');
    author.className = 'info';
    author.textContent = data.author || '';
    info.appendChild(author);

    link.append(title, subtitle, info);
    return link;
  }

  button.addEventListener('click', async () => {
    const cursor = button.dataset.nextPage;
    if (!cursor || button.disabled) return;
    // One request at a time; a second click while loading would append the page twice.
    button.disabled = true;
    try {
      const response = await fetch(cursor);
      if (!response.ok) {
        throw new Error(`Failed to load posts: ${response.status}`);
      }
      const page = await response.json();
      (page.results || []).forEach((doc) => list.appendChild(summaryFor(doc)));
      if (page.next_page) {
        button.dataset.nextPage = page.next_page;
        button.disabled = false;
      } else {
        button.remove();
      }
    } catch (error) {
      console.warn('[load-more] request failed', error);
      button.disabled = false;
    }
  });
})();
"""


def generate_load_more_js(out_dir: Path) -> Path:
    """Write the listing page's "load more" script and return its path."""

    target_path = ensure_dir(out_dir / "shared") / "load-more.js"
    target_path.write_text(LOAD_MORE_JS.lstrip(), encoding="utf-8")
    return target_path


__all__ = ["LOAD_MORE_JS", "generate_load_more_js"]

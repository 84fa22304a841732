"""Post-build validator for portfolio embeds.

Checks every embed figure rendered by the portfolio_embed plugin in the
output/ directory before deployment. Reports figures without a placeholder or
live frame, figures with no frame source, and figures whose declared provider
disagrees with the classifier.

Usage (after `pip install -e .`, which puts portfolio_embed on the path):
    python validate_output.py                    # default: internal only
    python validate_output.py --check-external   # also HEAD thumbnail URLs (slow)
    python validate_output.py --output-dir public

Exit codes:
    0 = all validations passed
    1 = validation errors found
"""
from __future__ import annotations

import argparse
import sys
from collections import defaultdict
from pathlib import Path

import requests
from bs4 import BeautifulSoup

from portfolio_embed.providers import DAILYMOTION, OTHER, YOUTUBE, classify

EMBED_CLASSES = ('portfolio-embed', 'portfolio-audio')


def find_embeds(html: str) -> list:
    soup = BeautifulSoup(html, 'html.parser')
    return [
        figure for figure in soup.find_all('figure')
        if any(name in (figure.get('class') or []) for name in EMBED_CLASSES)
    ]


def check_figure(figure) -> list[str]:
    """Return the problems found in one embed figure."""
    issues = []
    provider = figure.get('data-provider')
    src = figure.get('data-embed-src')
    label = src or '<no source>'

    if not src:
        issues.append(f"Embed without frame source (provider={provider})")
        return issues

    has_frame = figure.find('iframe') is not None
    has_placeholder = figure.find(class_=lambda c: bool(c) and c.endswith('-placeholder')) is not None
    if figure.get('data-state') == 'activated':
        if not has_frame:
            issues.append(f"Activated embed without iframe: {label}")
    elif not has_placeholder:
        issues.append(f"Dormant embed without placeholder: {label}")

    audio = 'portfolio-audio' in (figure.get('class') or [])
    if not audio and provider in (YOUTUBE, DAILYMOTION):
        if provider == YOUTUBE and 'youtube-nocookie.com/embed/' not in src:
            issues.append(f"YouTube embed not using the privacy endpoint: {label}")
        elif provider == DAILYMOTION and classify(src).provider != DAILYMOTION:
            issues.append(f"Dailymotion embed with foreign source: {label}")
    if provider == DAILYMOTION and figure.get('data-state') != 'activated' and not figure.find('button'):
        issues.append(f"Click-to-play embed without play button: {label}")
    if provider not in (YOUTUBE, DAILYMOTION, OTHER):
        issues.append(f"Unknown provider tag {provider!r}: {label}")
    return issues


def validate_embeds(output_dir: Path) -> tuple[dict, set[str], int]:
    """Returns (errors, thumbnail urls, embed count)."""
    errors = defaultdict(list)
    thumbnails = set()
    count = 0
    html_files = list(output_dir.rglob('*.html'))

    print(f"[INFO] Validating embeds in {len(html_files)} HTML files in {output_dir}...")

    for html_file in html_files:
        rel_source = html_file.relative_to(output_dir)
        try:
            html = html_file.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            print(f"[WARN] Failed to read {rel_source}: {e}")
            continue
        for figure in find_embeds(html):
            count += 1
            errors[str(rel_source)].extend(check_figure(figure))
            if figure.get('data-thumbnail'):
                thumbnails.add(figure['data-thumbnail'])
        if not errors[str(rel_source)]:
            del errors[str(rel_source)]

    return dict(errors), thumbnails, count


def check_thumbnails(urls: set[str]) -> list[str]:
    """Optionally HEAD each thumbnail URL (slow)."""
    errors = []
    print(f"[INFO] Checking {len(urls)} thumbnail URLs...")
    for url in sorted(urls):
        try:
            resp = requests.head(url, timeout=10, allow_redirects=True)
            if resp.status_code >= 400:
                errors.append(f"{url} -> HTTP {resp.status_code}")
        except requests.RequestException as e:
            errors.append(f"{url} -> {type(e).__name__}: {e}")
    return errors


def print_report(errors: dict, external_errors: list[str], count: int) -> int:
    print("\n" + "=" * 70)
    print("EMBED VALIDATION REPORT")
    print("=" * 70)

    if errors:
        total = sum(len(v) for v in errors.values())
        print(f"\n[ERROR] {total} embed problem(s):\n")
        for source, issues in sorted(errors.items()):
            print(f"  {source}:")
            for issue in issues:
                print(f"    - {issue}")
    else:
        print("\n[OK] All embeds validated successfully.")

    if external_errors:
        print(f"\n[WARN] {len(external_errors)} unreachable thumbnail(s):\n")
        for issue in external_errors:
            print(f"  - {issue}")

    print("\n" + "=" * 70)
    print(f"  Embeds checked: {count}")
    print(f"  Errors: {sum(len(v) for v in errors.values())}")
    print("=" * 70)
    return 1 if errors else 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Validate rendered portfolio embeds")
    parser.add_argument('--output-dir', default='output', help='Output directory to validate (default: output)')
    parser.add_argument('--check-external', action='store_true', help='HEAD thumbnail URLs (slow)')
    args = parser.parse_args(argv)

    output_dir = Path(args.output_dir).resolve()
    if not output_dir.exists():
        print(f"[ERROR] Output directory not found: {output_dir}")
        print("Run 'pelican content' to generate the site first.")
        return 1

    errors, thumbnails, count = validate_embeds(output_dir)
    external_errors = check_thumbnails(thumbnails) if args.check_external else []
    return print_report(errors, external_errors, count)


if __name__ == '__main__':
    sys.exit(main())

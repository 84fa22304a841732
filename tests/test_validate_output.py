import validate_output
from portfolio_embed.plugin import _replace_embeds_in_text

OFFLINE = {"PORTFOLIO_RESOLVE_THUMBNAILS": False}


def write_page(root, name, body):
    path = root / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"<html><body>{body}</body></html>", encoding="utf-8")
    return path


def test_rendered_embeds_pass(tmp_path, capsys):
    body = _replace_embeds_in_text(
        "[[embed:https://youtu.be/abc123]] [[embed:https://dai.ly/k2x9]] "
        "[[embed:https://example.com/clip.mp4]] [[audio:https://soundcloud.com/a/b]]",
        OFFLINE,
    )
    write_page(tmp_path, "work.html", body)

    assert validate_output.main(["--output-dir", str(tmp_path)]) == 0
    assert "Embeds checked: 4" in capsys.readouterr().out


def test_broken_embeds_fail(tmp_path, capsys):
    write_page(
        tmp_path,
        "blog/broken.html",
        '<figure class="portfolio-embed" data-provider="youtube" data-state="dormant" '
        'data-embed-src="https://www.youtube.com/embed/abc123"></figure>'
        '<figure class="portfolio-embed" data-provider="dailymotion" data-state="dormant"></figure>',
    )

    assert validate_output.main(["--output-dir", str(tmp_path)]) == 1
    out = capsys.readouterr().out
    assert "Dormant embed without placeholder" in out
    assert "privacy endpoint" in out
    assert "Embed without frame source" in out


def test_check_figure_flags_missing_play_button():
    [figure] = validate_output.find_embeds(
        '<figure class="portfolio-embed" data-provider="dailymotion" data-state="dormant" '
        'data-embed-src="https://www.dailymotion.com/embed/video/k2x9">'
        '<div class="portfolio-embed-placeholder"></div></figure>'
    )
    assert validate_output.check_figure(figure) == [
        "Click-to-play embed without play button: https://www.dailymotion.com/embed/video/k2x9"
    ]


def test_missing_output_dir(tmp_path):
    assert validate_output.main(["--output-dir", str(tmp_path / "missing")]) == 1

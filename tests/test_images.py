import pytest
from PIL import Image

from blog_builder import AssetConflictError, ScaleResize, ThumbnailResize, make_resize_policy

HEADER = "-time=2020-01-02\n# T\n\n"


def test_image_in_own_asset_dir(site):
    site.image("1/pic.png", size=(100, 50))
    doc = site.post("1-a.md", HEADER + "![A pic](pic.png)\n")
    html, err = site.render(doc)

    assert err is None
    assert '<img src="1/pic.png" alt="A pic" width="100" height="50" />' in html
    assert site.assets.source_for("1/pic.png") == site.root / "1" / "pic.png"


def test_image_from_ancestor(site):
    site.image("1/shared.png")
    site.post("1-root.md", HEADER)
    site.post("2-mid.md", "-parent=1\n" + HEADER)
    leaf = site.post("3-leaf.md", "-parent=2\n" + HEADER + "![x](shared.png)\n")
    html, err = site.render(leaf)

    assert err is None
    assert 'src="1/shared.png"' in html
    assert "1/shared.png" in site.assets


def test_own_image_shadows_ancestor(site):
    site.image("1/pic.png", size=(10, 10))
    site.image("2/pic.png", size=(20, 20))
    site.post("1-root.md", HEADER)
    child = site.post("2-child.md", "-parent=1\n" + HEADER + "![x](pic.png)\n")
    html, err = site.render(child)

    assert err is None
    assert 'src="2/pic.png"' in html
    assert 'width="20"' in html


def test_image_relative_to_content_root(site):
    site.image("img/logo.png")
    doc = site.post("1-a.md", HEADER + "![logo](img/logo.png)\n")
    html, err = site.render(doc)
    assert err is None
    assert 'src="img/logo.png"' in html


def test_escaped_name(site):
    site.image("1/my pic.png")
    doc = site.post("1-a.md", HEADER + "![x](my%20pic.png)\n")
    html, err = site.render(doc)
    assert err is None
    assert "1/my pic.png" in site.assets
    assert 'src="1/my%20pic.png"' in html


def test_absolute_url_passes_through(site):
    doc = site.post("1-a.md", HEADER + "![remote](https://example.com/a.png)\n")
    html, err = site.render(doc)
    assert err is None
    assert '<img src="https://example.com/a.png" alt="remote" />' in html
    assert len(site.assets) == 0


def test_absolute_path_is_rejected(site):
    doc = site.post("1-a.md", HEADER + "![x](/etc/pic.png)\n")
    html, err = site.render(doc)
    assert "needs to be either an absolute URL or a relative path." in str(err)
    assert "<img" not in html


@pytest.mark.parametrize("ref", ["nope.png", "img/nope.png", "../outside.png"])
def test_missing_image(site, ref):
    doc = site.post("1-a.md", HEADER + f"![x]({ref})\n")
    _, err = site.render(doc)
    assert f"Image {ref!r} not found." in str(err)


def test_unreadable_image(site):
    (site.root / "1").mkdir()
    site.write("1/broken.png", "not an image")
    doc = site.post("1-a.md", HEADER + "![x](broken.png)\n")
    _, err = site.render(doc)
    assert "cannot read image 'broken.png'" in str(err)


def test_class_annotation(site):
    site.image("1/pic.png")
    doc = site.post("1-a.md", HEADER + "![{wide} Caption text](pic.png)\n")
    html, err = site.render(doc)
    assert err is None
    assert 'alt="Caption text"' in html
    assert 'class="wide"' in html


def test_explicit_title(site):
    site.image("1/pic.png")
    doc = site.post("1-a.md", HEADER + '![x](pic.png "Tom & Jerry")\n')
    html, _ = site.render(doc)
    assert 'title="Tom &amp; Jerry"' in html


def test_oversized_thumbnail(site, capsys):
    site.image("1/big.png", size=(1400, 700))
    doc = site.post("1-a.md", HEADER + "![big](big.png)\n")
    html, err = site.render(doc, max_width=700)

    assert err is None
    assert html.count('<a href="1/big.png">') == 1
    assert 'src="1/big.png.thumb.jpg"' in html
    assert 'width="700" height="350"' in html
    assert 'title="Click for full-size version."' in html
    assert "1/big.png" in site.assets
    assert "1/big.png.thumb.jpg" in site.assets
    assert "wider (1400 pixels) than maximum of 700 pixels" in capsys.readouterr().err

    with Image.open(site.root / "1" / "big.png.thumb.jpg") as thumb:
        assert thumb.size == (700, 350)
        assert thumb.format == "JPEG"


def test_transparent_thumbnail_is_png(site):
    site.image("1/alpha.png", size=(1000, 100), mode="RGBA")
    doc = site.post("1-a.md", HEADER + "![a](alpha.png)\n")
    html, err = site.render(doc, max_width=500)

    assert err is None
    assert 'src="1/alpha.png.thumb.png"' in html
    with Image.open(site.root / "1" / "alpha.png.thumb.png") as thumb:
        assert thumb.mode == "RGBA"
        assert thumb.size == (500, 50)


def test_thumbnail_is_not_rewritten(site):
    site.image("1/big.png", size=(1400, 700))
    doc = site.post("1-a.md", HEADER + "![big](big.png)\n")
    site.render(doc)
    thumb = site.root / "1" / "big.png.thumb.jpg"
    stamp = thumb.stat().st_mtime_ns

    site.render(doc)
    assert thumb.stat().st_mtime_ns == stamp


def test_stale_thumbnail_is_regenerated(site):
    site.image("1/big.png", size=(1400, 700))
    doc = site.post("1-a.md", HEADER + "![big](big.png)\n")
    site.render(doc, max_width=700)
    site.render(doc, max_width=350)

    with Image.open(site.root / "1" / "big.png.thumb.jpg") as thumb:
        assert thumb.size == (350, 175)


def test_oversized_scale(site):
    site.image("1/big.png", size=(1400, 700))
    doc = site.post("1-a.md", HEADER + "![{hero} big](big.png)\n")
    html, err = site.render(doc, policy=ScaleResize())

    assert err is None
    assert html == (
        '<p><a href="1/big.png"><img src="1/big.png" alt="big" title="Click for full-size version." '
        'class="hero" width="700" height="350" /></a></p>\n'
    )
    assert not (site.root / "1" / "big.png.thumb.jpg").exists()


def test_image_claimed_by_other_file(site):
    site.image("1/pic.png")
    site.assets.add("1/pic.png", site.root / "elsewhere.png")
    doc = site.post("1-a.md", HEADER + "![x](pic.png)\n")
    with pytest.raises(AssetConflictError, match="Double definition for path '1/pic.png'"):
        site.render(doc)


def test_make_resize_policy():
    assert isinstance(make_resize_policy("scale"), ScaleResize)
    assert isinstance(make_resize_policy("thumbnail"), ThumbnailResize)
    with pytest.raises(ValueError):
        make_resize_policy("crop")

from menus.extractor import looks_like_menu, restaurant_name


def test_menu_url_passes_gate():
    assert looks_like_menu("https://tonys.example/Menu/dinner", "")


def test_page_text_markers_pass_gate():
    assert looks_like_menu("https://tonys.example/", "See our PRICES")
    assert looks_like_menu("https://tonys.example/", "coffee $3")


def test_plain_page_is_skipped():
    assert not looks_like_menu("https://tonys.example/about", "We opened in 1987.")


def test_restaurant_name_prefers_og_site_name(parse):
    document = parse(
        """
        <html><head>
          <meta property="og:title" content="Dinner Menu">
          <meta property="og:site_name" content="Tony's">
          <title>Tony's | Home</title>
        </head><body><h1>Welcome</h1></body></html>
        """
    )

    assert restaurant_name(document) == "Tony's"


def test_restaurant_name_falls_through_empty_values(parse):
    document = parse(
        """
        <html><head>
          <meta property="og:site_name" content="  ">
          <title>Luigi's Trattoria</title>
        </head><body><h1> </h1></body></html>
        """
    )

    assert restaurant_name(document) == "Luigi's Trattoria"


def test_restaurant_name_uses_first_h1(parse):
    document = parse("<body><h1> Casa Pepe </h1><h1>Other</h1></body>")

    assert restaurant_name(document) == "Casa Pepe"


def test_restaurant_name_missing(parse):
    assert restaurant_name(parse("<body><p>menu</p></body>")) == ""

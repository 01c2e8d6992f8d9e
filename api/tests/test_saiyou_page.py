from __future__ import annotations

from typing import Any, Callable

from fastapi.testclient import TestClient

NO_POSTINGS = "求人が見つかりませんでした。"


def test_page_lists_postings_with_dividers_between_items(api_client: TestClient) -> None:
    response = api_client.get("/saiyou")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/html")
    html = response.text

    assert html.count('<div class="job-item">') == 4
    assert html.count('<hr class="job-divider">') == 3
    assert "最近追加された求人" in html
    assert NO_POSTINGS not in html
    assert html.index("ITエンジニア") < html.index("ホテル受付") < html.index("倉庫作業") < html.index("介護スタッフ募集")


def test_posting_card_renders_all_fields(api_client: TestClient) -> None:
    html = api_client.get("/saiyou", params={"job_category": "IT"}).text

    assert '<a href="/saiyou/2">ITエンジニア</a>' in html
    assert "2024-05-10 | 採用情報" in html
    assert '<img src="uploads/it.jpg" alt="ITエンジニア">' in html
    assert "会社名 – テック株式会社" in html
    assert "給与 – 月給25万円" in html
    assert "職種 – 正社員" in html
    assert "勤務地 – 東京" in html
    assert "日本語レベル – N1" in html
    assert "年間最低休暇 – 105 日" in html
    assert '<hr class="job-divider">' not in html


def test_posting_without_image_uses_default(api_client: TestClient) -> None:
    html = api_client.get("/saiyou", params={"job_category": "宿泊"}).text
    assert '<img src="images/default_job_image.jpg" alt="Default Image">' in html


def test_search_term_switches_heading(api_client: TestClient) -> None:
    html = api_client.get("/saiyou", params={"q": "ホテル"}).text

    assert "マッチング求人" in html
    assert html.count('<div class="job-item">') == 1


def test_no_matches_render_message_instead_of_cards(api_client: TestClient) -> None:
    html = api_client.get("/saiyou", params={"location": "札幌"}).text

    assert f"<p>{NO_POSTINGS}</p>" in html
    assert '<div class="job-item">' not in html


def test_filter_controls_list_all_options_and_mark_selection(api_client: TestClient) -> None:
    html = api_client.get("/saiyou", params={"location": "東京", "japanese_level": "N9"}).text

    assert '<select name="location">' in html
    assert '<option value="東京" selected>東京</option>' in html
    assert '<option value="大阪">大阪</option>' in html
    # Options come from every job posting, not just the filtered ones.
    assert '<option value="物流">物流</option>' in html
    # An unknown selection marks nothing.
    assert '<option value="N2">N2</option>' in html
    assert " selected>N" not in html
    assert html.count('<option value="">全て</option>') == 4


def test_posting_text_is_escaped(
    api_client: TestClient,
    fake_repository: Any,
    make_post: Callable[..., dict[str, Any]],
) -> None:
    fake_repository.rows.append(make_post(7, title="<script>alert(1)</script>", job_location="福岡"))

    html = api_client.get("/saiyou", params={"location": "福岡"}).text

    assert "<script>" not in html
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html


def test_page_fails_whole_request_when_database_is_unavailable(
    api_client: TestClient,
    fake_repository: Any,
) -> None:
    fake_repository.unavailable = True
    response = api_client.get("/saiyou")

    assert response.status_code == 503
    assert "job-item" not in response.text


def test_detail_page_renders_posting_and_404s_when_missing(api_client: TestClient) -> None:
    response = api_client.get("/saiyou/2")
    assert response.status_code == 200
    assert '<h2 class="job-title">ITエンジニア</h2>' in response.text
    assert "Webアプリ開発" in response.text

    assert api_client.get("/saiyou/404").status_code == 404


def test_search_form_echoes_current_term_escaped(api_client: TestClient) -> None:
    html = api_client.get("/saiyou", params={"q": "ホテル"}).text

    assert '<form class="search-form" action="/saiyou" method="GET">' in html
    assert 'name="q" placeholder="場所、会社、カテゴリ、キーワードで検索" value="ホテル"' in html

    quoted = api_client.get("/saiyou", params={"q": '"><b>'}).text
    assert 'value="&#34;&gt;&lt;b&gt;"' in quoted


def test_search_form_is_empty_without_term(api_client: TestClient) -> None:
    html = api_client.get("/saiyou").text
    assert 'placeholder="場所、会社、カテゴリ、キーワードで検索" value=""' in html


def test_padded_stored_value_is_offered_trimmed_and_selectable(
    api_client: TestClient,
    fake_repository: Any,
    make_post: Callable[..., dict[str, Any]],
) -> None:
    fake_repository.rows.append(make_post(8, title="通訳スタッフ", job_location=" 福岡 "))

    html = api_client.get("/saiyou").text
    assert '<option value="福岡">福岡</option>' in html

    selected = api_client.get("/saiyou", params={"location": "福岡"}).text
    assert '<option value="福岡" selected>福岡</option>' in selected
    assert selected.count('<div class="job-item">') == 1

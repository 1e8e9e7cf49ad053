"""API tests for tenant-scoped article and comment endpoints."""

from __future__ import annotations

from django.test import override_settings
from rest_framework.test import APIClient

from access_control.checks import article_actions_declare_capability
from articles.models import Article, ArticleStatus, Comment
from tests.utils import RedisPatchedTestCase, access_token, auth_client, create_org, create_user


class ArticleScenarioTests(RedisPatchedTestCase):
    """Walk through the full publish and comment flow using only the API."""

    def test_publish_and_comment_flow(self):
        anonymous = APIClient()
        admin_body = anonymous.post(
            "/auth/register/",
            {"name": "Ada", "email": "ada@example.com", "password": "AdminPass123", "role": "admin"},
            format="json",
        ).json()["data"]
        admin = APIClient()
        admin.credentials(HTTP_AUTHORIZATION=f"Bearer {admin_body['access']}")

        org_response = admin.post("/organizations/", {"name": "Gazette"}, format="json")
        self.assertEqual(org_response.status_code, 201)
        org_id = org_response.json()["data"]["id"]
        admin.credentials(
            HTTP_AUTHORIZATION=f"Bearer {admin_body['access']}",
            HTTP_X_ORGANIZATION_ID=str(org_id),
        )

        create_response = admin.post("/articles/", {"title": "Launch", "content": "Soon"}, format="json")
        self.assertEqual(create_response.status_code, 201)
        article = create_response.json()["data"]
        self.assertEqual(article["status"], "draft")
        self.assertEqual(article["organization"], org_id)
        article_url = f"/articles/{article['id']}/"

        detail = admin.get(article_url).json()["data"]
        self.assertEqual(detail["permission"], "owner")

        publish = admin.patch(article_url, {"status": "published"}, format="json")
        self.assertEqual(publish.status_code, 200)
        self.assertEqual(publish.json()["data"]["status"], "published")

        member_body = anonymous.post(
            "/auth/register/",
            {"name": "Max", "email": "max@example.com", "password": "MemberPass123", "organization_id": org_id},
            format="json",
        ).json()["data"]
        member = APIClient()
        member.credentials(
            HTTP_AUTHORIZATION=f"Bearer {member_body['access']}",
            HTTP_X_ORGANIZATION_ID=str(org_id),
        )

        member_view = member.get(article_url)
        self.assertEqual(member_view.status_code, 200)
        self.assertEqual(member_view.json()["data"]["permission"], "comment")

        comment_response = member.post(f"{article_url}comments/", {"content": "Great news"}, format="json")
        self.assertEqual(comment_response.status_code, 201)
        comment_id = comment_response.json()["data"]["id"]

        edit_attempt = member.patch(article_url, {"title": "Hijacked"}, format="json")
        self.assertEqual(edit_attempt.status_code, 403)
        self.assertEqual(edit_attempt.json()["code"], "forbidden")

        self.assertEqual(member.delete(f"{article_url}comments/{comment_id}/").status_code, 403)
        self.assertEqual(member.delete(article_url).status_code, 403)

        self.assertEqual(admin.delete(f"{article_url}comments/{comment_id}/").status_code, 204)
        self.assertEqual(admin.delete(article_url).status_code, 204)
        self.assertFalse(Article.objects.filter(pk=article["id"]).exists())


class ArticleAccessTests(RedisPatchedTestCase):
    """Role, tenant and status checks on article endpoints."""

    @classmethod
    def setUpTestData(cls):
        cls.author = create_user("author@example.com", role="member")
        cls.admin = create_user("admin@example.com", role="admin")
        cls.editor = create_user("editor@example.com", role="editor")
        cls.member = create_user("member@example.com", role="member")
        cls.viewer = create_user("viewer@example.com", role="viewer")
        cls.org = create_org("Org One", cls.author, cls.admin, cls.editor, cls.member, cls.viewer)
        cls.other_org = create_org("Org Two")

        cls.draft = Article.objects.create(title="Draft", content="D", organization=cls.org, author=cls.author)
        cls.published = Article.objects.create(
            title="Published",
            content="P",
            organization=cls.org,
            author=cls.author,
            status=ArticleStatus.PUBLISHED,
        )
        cls.foreign = Article.objects.create(
            title="Foreign",
            content="F",
            organization=cls.other_org,
            author=cls.admin,
            status=ArticleStatus.PUBLISHED,
        )
        cls.comment = Comment.objects.create(content="First", article=cls.published, author=cls.member)

    def test_missing_tenant_header_is_bad_request(self):
        client = auth_client(self.member)
        for url in ("/articles/", f"/articles/{self.published.pk}/"):
            with self.subTest(url=url):
                response = client.get(url)
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["code"], "missing_tenant")

    def test_malformed_and_unknown_tenant(self):
        token = access_token(self.member)
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}", HTTP_X_ORGANIZATION_ID="abc")
        response = client.get("/articles/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "invalid_tenant")

        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}", HTTP_X_ORGANIZATION_ID=str(self.other_org.pk + 1000))
        response = client.get("/articles/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "tenant_not_found")

    def test_requests_without_credentials_are_unauthenticated(self):
        response = auth_client(organization=self.org).get("/articles/")
        body = response.json()
        self.assertEqual(response.status_code, 401)
        self.assertIsNone(body["data"])
        self.assertEqual(body["code"], "unauthenticated")

    def test_tenant_is_resolved_before_the_token(self):
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")
        response = client.get("/articles/")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "missing_tenant")

        client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt", HTTP_X_ORGANIZATION_ID=str(self.org.pk))
        response = client.get("/articles/")
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["code"], "unauthenticated")

    def test_invalid_and_missing_article_ids(self):
        client = auth_client(self.member, self.org)
        for raw in ("abc", "0"):
            with self.subTest(raw=raw):
                response = client.get(f"/articles/{raw}/")
                self.assertEqual(response.status_code, 400)
                self.assertEqual(response.json()["code"], "invalid_resource_id")

        response = client.get(f"/articles/{self.foreign.pk + 1000}/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "resource_not_found")

    def test_ids_beyond_key_range_are_not_found(self):
        huge = "9" * 23
        response = auth_client(self.member, self.org).get(f"/articles/{huge}/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "resource_not_found")

        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {access_token(self.member)}", HTTP_X_ORGANIZATION_ID=huge)
        response = client.get("/articles/")
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()["code"], "tenant_not_found")

    def test_cross_tenant_fetch_is_forbidden_even_for_admin(self):
        client = auth_client(self.admin, self.other_org)
        response = client.get(f"/articles/{self.published.pk}/")
        body = response.json()
        self.assertEqual(response.status_code, 403)
        self.assertEqual(body["code"], "tenant_mismatch")
        self.assertIsNone(body["data"])

    def test_cross_tenant_writes_never_reach_the_handler(self):
        client = auth_client(self.admin, self.org)
        self.assertEqual(client.patch(f"/articles/{self.foreign.pk}/", {"title": "X"}, format="json").status_code, 403)
        self.assertEqual(client.delete(f"/articles/{self.foreign.pk}/").status_code, 403)
        self.assertEqual(
            client.post(f"/articles/{self.foreign.pk}/comments/", {"content": "X"}, format="json").status_code,
            403,
        )
        self.foreign.refresh_from_db()
        self.assertEqual(self.foreign.title, "Foreign")
        self.assertFalse(self.foreign.comments.exists())

    def test_viewer_permissions(self):
        client = auth_client(self.viewer, self.org)
        self.assertEqual(client.get(f"/articles/{self.draft.pk}/").status_code, 403)

        published = client.get(f"/articles/{self.published.pk}/")
        self.assertEqual(published.status_code, 200)
        self.assertEqual(published.json()["data"]["permission"], "view")

        self.assertEqual(client.get(f"/articles/{self.published.pk}/comments/").status_code, 200)
        comment = client.post(f"/articles/{self.published.pk}/comments/", {"content": "Hi"}, format="json")
        self.assertEqual(comment.status_code, 403)

    def test_editor_comments_on_drafts_and_edits_published(self):
        client = auth_client(self.editor, self.org)
        draft = client.get(f"/articles/{self.draft.pk}/")
        self.assertEqual(draft.json()["data"]["permission"], "comment")
        self.assertEqual(client.patch(f"/articles/{self.draft.pk}/", {"title": "X"}, format="json").status_code, 403)
        self.assertEqual(
            client.post(f"/articles/{self.draft.pk}/comments/", {"content": "Needs work"}, format="json").status_code,
            201,
        )

        update = client.patch(f"/articles/{self.published.pk}/", {"title": "Edited"}, format="json")
        self.assertEqual(update.status_code, 200)
        self.assertEqual(update.json()["data"]["title"], "Edited")
        self.assertEqual(update.json()["data"]["author"], self.author.pk)

    def test_admin_edits_but_cannot_delete_foreign_articles(self):
        client = auth_client(self.admin, self.org)
        self.assertEqual(client.get(f"/articles/{self.draft.pk}/").json()["data"]["permission"], "edit")
        self.assertEqual(client.patch(f"/articles/{self.draft.pk}/", {"title": "Fixed"}, format="json").status_code, 200)
        self.assertEqual(client.delete(f"/articles/{self.draft.pk}/").status_code, 403)
        self.assertTrue(Article.objects.filter(pk=self.draft.pk).exists())

    def test_mixed_case_role_gets_no_admin_rights(self):
        pretender = create_user("pretender@example.com")
        type(pretender).objects.filter(pk=pretender.pk).update(role="Admin")
        client = auth_client(pretender, self.org)
        self.assertEqual(client.get(f"/articles/{self.draft.pk}/").status_code, 403)
        self.assertEqual(client.get(f"/articles/{self.published.pk}/").json()["data"]["permission"], "view")
        self.assertEqual(client.patch(f"/articles/{self.published.pk}/", {"title": "X"}, format="json").status_code, 403)

    def test_owner_can_unpublish(self):
        client = auth_client(self.author, self.org)
        response = client.patch(f"/articles/{self.published.pk}/", {"status": "draft"}, format="json")
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()["data"]["status"], "draft")

    def test_invalid_status_is_rejected(self):
        client = auth_client(self.author, self.org)
        response = client.patch(f"/articles/{self.published.pk}/", {"status": "archived"}, format="json")
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()["code"], "invalid")

    def test_list_is_filtered_by_view_permission(self):
        viewer_titles = {a["title"] for a in auth_client(self.viewer, self.org).get("/articles/").json()["data"]}
        self.assertEqual(viewer_titles, {"Published"})

        member_titles = {a["title"] for a in auth_client(self.member, self.org).get("/articles/").json()["data"]}
        self.assertEqual(member_titles, {"Draft", "Published"})

    def test_create_binds_tenant_and_author(self):
        client = auth_client(self.viewer, self.org)
        response = client.post(
            "/articles/",
            {"title": "Mine", "content": "Body", "organization": self.other_org.pk, "author": self.admin.pk},
            format="json",
        )
        self.assertEqual(response.status_code, 201)
        article = Article.objects.get(pk=response.json()["data"]["id"])
        self.assertEqual(article.organization, self.org)
        self.assertEqual(article.author, self.viewer)

    def test_published_feed_is_public_and_cross_tenant(self):
        response = APIClient().get("/articles/published/")
        self.assertEqual(response.status_code, 200)
        titles = {a["title"] for a in response.json()["data"]}
        self.assertEqual(titles, {"Published", "Foreign"})

    def test_my_articles_span_tenants(self):
        self.assertEqual(APIClient().get("/articles/my/").status_code, 401)
        response = auth_client(self.admin).get("/articles/my/")
        self.assertEqual(response.status_code, 200)
        self.assertEqual([a["title"] for a in response.json()["data"]], ["Foreign"])

    def test_comment_update_is_limited_to_its_author(self):
        url = f"/articles/{self.published.pk}/comments/{self.comment.pk}/"
        other = auth_client(self.editor, self.org).patch(url, {"content": "Rewritten"}, format="json")
        self.assertEqual(other.status_code, 403)

        own = auth_client(self.member, self.org).patch(url, {"content": "Edited"}, format="json")
        self.assertEqual(own.status_code, 200)
        self.assertEqual(own.json()["data"]["content"], "Edited")

    def test_comment_must_belong_to_addressed_article(self):
        client = auth_client(self.author, self.org)
        response = client.delete(f"/articles/{self.draft.pk}/comments/{self.comment.pk}/")
        self.assertEqual(response.status_code, 404)
        self.assertTrue(Comment.objects.filter(pk=self.comment.pk).exists())

    def test_article_owner_deletes_comments(self):
        client = auth_client(self.author, self.org)
        response = client.delete(f"/articles/{self.published.pk}/comments/{self.comment.pk}/")
        self.assertEqual(response.status_code, 204)
        self.assertFalse(Comment.objects.filter(pk=self.comment.pk).exists())

    @override_settings(REQUIRE_TENANT_MEMBERSHIP=True)
    def test_membership_can_be_required(self):
        outsider = create_user("outsider@example.com", role="admin")
        response = auth_client(outsider, self.org).get(f"/articles/{self.published.pk}/")
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.json()["code"], "not_tenant_member")

        self.assertEqual(auth_client(self.member, self.org).get(f"/articles/{self.published.pk}/").status_code, 200)


class CapabilityCheckTests(RedisPatchedTestCase):
    def test_every_detail_action_declares_a_capability(self):
        self.assertEqual(article_actions_declare_capability(None), [])

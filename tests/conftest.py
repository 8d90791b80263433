import pytest
from flask import Flask
from attachable import AttachableAPI, AttachableResource, DB

post_tags = DB.Table(
    "post_tags",
    DB.Column("post_id", DB.Integer, DB.ForeignKey("posts.id"), primary_key=True),
    DB.Column("tag_id", DB.Integer, DB.ForeignKey("tags.id"), primary_key=True),
)

post_featured_tags = DB.Table(
    "post_featured_tags",
    DB.Column("post_id", DB.Integer, DB.ForeignKey("posts.id"), primary_key=True),
    DB.Column("tag_id", DB.Integer, DB.ForeignKey("tags.id"), primary_key=True),
)

post_labels = DB.Table(
    "post_labels",
    DB.Column("post_id", DB.Integer, DB.ForeignKey("posts.id"), primary_key=True),
    DB.Column("label_id", DB.String, DB.ForeignKey("labels.id"), primary_key=True),
)


class Tag(DB.Model):
    """
    description: many-to-many target
    """

    __tablename__ = "tags"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String, default="")


class Label(DB.Model):
    """
    description: target of a lazy="dynamic" relationship, with a page size
    """

    __tablename__ = "labels"
    per_page = 2
    id = DB.Column(DB.String, primary_key=True)


class User(DB.Model):
    __tablename__ = "users"
    id = DB.Column(DB.Integer, primary_key=True)
    name = DB.Column(DB.String, default="")


class Post(DB.Model):
    __tablename__ = "posts"
    id = DB.Column(DB.Integer, primary_key=True)
    title = DB.Column(DB.String, default="")
    author_id = DB.Column(DB.Integer, DB.ForeignKey("users.id"))
    author = DB.relationship(User)
    tags = DB.relationship(Tag, secondary=post_tags, order_by=Tag.id)
    featuredTags = DB.relationship(Tag, secondary=post_featured_tags, order_by=Tag.id)
    labels = DB.relationship(Label, secondary=post_labels, lazy="dynamic", order_by=Label.id)


class PostResource(AttachableResource):
    Model = Post


class PublishedPostResource(AttachableResource):
    """
    owners are looked up with a query: drafts can't be modified
    """

    def model(self):
        return DB.session.query(Post).filter(Post.title != "draft")


class FilteredPostResource(AttachableResource):
    """
    Tag 4 is never attached, and the "broken" relation name makes the hook fail
    """

    Model = Post

    def prepare_attach_items(self, items, owner, relation):
        return [item for item in items if int(item) != 4]

    def prepare_sync_items(self, items, owner, relation):
        raise ValueError("hook failure")


@pytest.fixture
def app():
    app = Flask(__name__)
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", TESTING=True)
    DB.init_app(app)
    with app.app_context():
        api = AttachableAPI(app, app_db=DB, swaggerui_blueprint=False)
        api.expose(PostResource, "/posts")
        api.expose(PublishedPostResource, "/published")
        api.expose(FilteredPostResource, "/filtered")
        DB.create_all()
        seed()
        yield app
        DB.session.remove()
        DB.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


def seed():
    author = User(id=1, name="author")
    tags = [Tag(id=i, name=name) for i, name in enumerate("ABCD", start=1)]
    labels = [Label(id=f"label-{i}") for i in range(5)]
    post = Post(id=1, title="hello", author=author, tags=tags[:2], labels=labels)
    draft = Post(id=2, title="draft")
    DB.session.add_all(tags + labels + [author, post, draft])
    DB.session.commit()


def member_ids(post_id, relation="tags"):
    DB.session.expire_all()
    post = DB.session.get(Post, post_id)
    return sorted(member.id for member in getattr(post, relation))

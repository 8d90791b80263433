#!/usr/bin/env python3
"""
  This demo application exposes the many-to-many relationships of a Post model
  $ python3 demo_attachable.py [Listener-IP]

  This will run the example on http://Listener-Ip:5000

  - An sqlite database is created and populated
  - The relationship endpoints are created:
      GET    /posts/<id>/tags
      POST   /posts/<id>/tags   {"tags": [3, 4]}
      DELETE /posts/<id>/tags   {"tags": [1]}
      PUT    /posts/<id>/tags   {"tags": [2, 3]}
  - Swagger documentation is served on /docs

"""
import sys
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from attachable import AttachableAPI, AttachableResource

db = SQLAlchemy()

post_tags = db.Table(
    "post_tags",
    db.Column("post_id", db.Integer, db.ForeignKey("posts.id"), primary_key=True),
    db.Column("tag_id", db.Integer, db.ForeignKey("tags.id"), primary_key=True),
)


class Tag(db.Model):
    __tablename__ = "tags"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String, default="")

    def to_dict(self):
        return {"id": self.id, "name": self.name}


class Post(db.Model):
    __tablename__ = "posts"
    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String, default="")
    published = db.Column(db.Boolean, default=True)
    tags = db.relationship(Tag, secondary=post_tags, order_by=Tag.id)


class PostResource(AttachableResource):
    """
    Only the published posts can be modified
    """

    def model(self):
        return db.session.query(Post).filter(Post.published.is_(True))

    def prepare_attach_items(self, items, owner, relation):
        # at most 10 tags per post
        return items[:10]


def create_api(app, host="localhost", port=5000, api_prefix=""):
    api = AttachableAPI(app, host=host, port=port, prefix=api_prefix, app_db=db)
    api.expose(PostResource, "/posts")
    print(f"Created API: http://{host}:{port}{api_prefix}/docs")


def create_app(host="localhost"):
    app = Flask("demo_app")
    app.config.update(SQLALCHEMY_DATABASE_URI="sqlite://", ATTACHABLE_SYNC_REPORT=True)
    db.init_app(app)

    with app.app_context():
        db.create_all()
        create_api(app, host)
        tags = [Tag(name=f"tag {i}") for i in range(20)]
        for i in range(5):
            db.session.add(Post(title=f"post {i}", published=i != 4, tags=tags[i : i + 3]))
        db.session.commit()

    return app


# Address where the api will be hosted, change this if you're not running the app on localhost!
host = sys.argv[1] if sys.argv[1:] else "127.0.0.1"
app = create_app(host=host)

if __name__ == "__main__":
    app.run(host=host)

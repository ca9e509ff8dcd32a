from django.contrib import admin

from .models import Chat, Chunk, Document, Message, Quiz, QuizAttempt


admin.site.register(Document)
admin.site.register(Chunk)
admin.site.register(Chat)
admin.site.register(Message)
admin.site.register(Quiz)
admin.site.register(QuizAttempt)
